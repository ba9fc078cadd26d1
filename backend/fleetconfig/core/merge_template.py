"""Partial Update Merge — field-by-field overlay of an update onto an existing template.

Invariants:
    - Returns a NEW ServiceConfigTemplate; the input is never mutated
    - Absent (None) or blank name/description mean "unchanged"
    - clear_description=True is the only way to blank a description
    - scope, device_type, id, created_at are never touched
    - config arrives already serialized: serialization happens before merge, so a
      failure leaves nothing half-applied
"""

from dataclasses import dataclass, replace

from fleetconfig.core.domain_types import ServiceConfigTemplate
from fleetconfig.core.validate_template import is_blank


@dataclass(frozen=True)
class TemplatePatch:
    """Independently optional fields of an update request."""
    name: str | None = None
    description: str | None = None
    config: str | None = None
    clear_description: bool = False


def merge_template(
    existing: ServiceConfigTemplate, patch: TemplatePatch,
) -> ServiceConfigTemplate:
    changes: dict = {}
    if not is_blank(patch.name):
        changes["name"] = patch.name.strip()
    if patch.clear_description:
        changes["description"] = None
    elif not is_blank(patch.description):
        changes["description"] = patch.description.strip()
    if patch.config is not None:
        changes["config"] = patch.config
    return replace(existing, **changes)
