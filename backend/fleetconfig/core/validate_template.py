"""Template Validation — creation-time checks, first failure wins.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Check order is fixed: name → scope → device type → config
    - Raises TemplateValidationError; returns the parsed scope on success

Design Decisions:
    - Raise rather than return error dicts: the service propagates these straight
      to the HTTP error handler without inspecting them
"""

from fleetconfig.core.device_configuration import DeviceConfiguration
from fleetconfig.core.domain_types import TemplateScope
from fleetconfig.core.errors import TemplateValidationError


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def check_scope(scope: str | None) -> TemplateScope:
    parsed = TemplateScope.parse(scope)
    if parsed is None:
        raise TemplateValidationError("invalid scope", field="scope")
    return parsed


def validate_new_template(
    name: str | None,
    scope: str | None,
    device_type: str | None,
    config: DeviceConfiguration | None,
) -> TemplateScope:
    """Validate create input in the documented order."""
    if is_blank(name):
        raise TemplateValidationError("name is required", field="name")
    parsed_scope = check_scope(scope)
    if parsed_scope is TemplateScope.DEVICE_TYPE and is_blank(device_type):
        raise TemplateValidationError("device type required", field="device_type")
    if config is None:
        raise TemplateValidationError("config is required", field="config")
    return parsed_scope
