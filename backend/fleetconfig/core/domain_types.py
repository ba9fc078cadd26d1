"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TemplateId wraps int (store-assigned), DeviceId wraps str (device registry key)
    - TemplateScope is the closed set of applicability classes: global, group, device_type
    - ServiceConfigTemplate.config is opaque serialized JSON; only redaction and
      update ever parse it

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TemplateId = NewType("TemplateId", int)
DeviceId = NewType("DeviceId", str)


# ─── Enums ───────────────────────────────────────────────────────

class TemplateScope(str, Enum):
    """Which devices a template can apply to."""
    GLOBAL = "global"
    GROUP = "group"
    DEVICE_TYPE = "device_type"

    @classmethod
    def parse(cls, value: str | None) -> "TemplateScope | None":
        """Return the matching scope, or None for absent/unrecognized values."""
        if not value:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


# ─── Entities ────────────────────────────────────────────────────

@dataclass
class ServiceConfigTemplate:
    """A named, persisted configuration template as seen by the service."""
    name: str
    scope: TemplateScope
    config: str
    description: str | None = None
    device_type: str | None = None
    id: TemplateId | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
