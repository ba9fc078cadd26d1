"""ConfigTemplate ORM — persists a reusable device configuration template.

Invariants:
    - id is an autoincrement integer assigned on insert
    - scope is one of global/group/device_type (validated by the service, not the DB)
    - config holds the serialized DeviceConfiguration with secrets intact;
      redaction happens only on the way out
    - name is NOT unique at the DB level

Design Decisions:
    - Text column for config rather than JSON: the payload is opaque to persistence
      and is parsed only by the redaction path
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from fleetconfig.db.base import Base


class ConfigTemplate(Base):
    """Configuration template row."""
    __tablename__ = "config_templates"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    scope: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True,
    )
    device_type: Mapped[str | None] = mapped_column(
        String(100), nullable=True, index=True,
    )
    config: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
