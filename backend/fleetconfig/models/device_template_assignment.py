"""DeviceTemplateAssignment ORM — which templates a device uses, in order.

Invariants:
    - (device_id, template_id) is unique
    - position orders a device's templates, 0-based, contiguous after every write
    - template_id references config_templates.id WITHOUT cascade: deleting an
      assigned template is refused by the service instead
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fleetconfig.db.base import Base


class DeviceTemplateAssignment(Base):
    """One device → template link."""
    __tablename__ = "device_template_assignments"
    __table_args__ = (
        UniqueConstraint("device_id", "template_id", name="uq_device_template"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    device_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    template_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("config_templates.id"), nullable=False, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
