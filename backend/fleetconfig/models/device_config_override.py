"""DeviceConfigOverride ORM — per-device configuration layered over its templates.

Invariants:
    - At most one row per device; device_id is the primary key
    - config holds a serialized DeviceConfiguration with secrets intact
    - Clearing overrides deletes the row rather than storing an empty document
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from fleetconfig.db.base import Base


class DeviceConfigOverride(Base):
    __tablename__ = "device_config_overrides"

    device_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    config: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
