"""Config Template Schemas — request/response contracts for templates, assignments and device config.

Invariants:
    - TemplateCreate fields are loosely typed (plain str/None): name, scope and
      device_type rules live in the service so their order and messages are fixed
    - TemplateUpdate has no scope/device_type fields: they are immutable
    - TemplateResponse never carries a secret value, only has_*_password booleans
    - Response models read from TemplateView via from_attributes

Design Decisions:
    - config typed as DeviceConfiguration: malformed JSON sections are rejected at the
      boundary with field-level details
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from fleetconfig.core.device_configuration import DeviceConfiguration


class TemplateCreate(BaseModel):
    """Template creation request."""
    name: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=10_000)
    scope: str | None = None
    device_type: str | None = Field(None, max_length=100)
    config: DeviceConfiguration | None = None


class TemplateUpdate(BaseModel):
    """Partial update — every field optional; blank name/description mean unchanged."""
    name: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=10_000)
    config: DeviceConfiguration | None = None
    clear_description: bool = False


class TemplateResponse(BaseModel):
    """Public-facing template with secrets redacted."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    scope: str
    device_type: str | None = None
    config: dict | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    has_wifi_password: bool | None = None
    has_mqtt_password: bool | None = None
    has_auth_password: bool | None = None


class TemplateEnvelope(BaseModel):
    template: TemplateResponse


class TemplateListResponse(BaseModel):
    templates: list[TemplateResponse]


class TemplateUpdateResponse(BaseModel):
    template: TemplateResponse
    affected_devices: int = Field(ge=0)


class AffectedDevicesResponse(BaseModel):
    template_id: int
    device_ids: list[str]
    count: int = Field(ge=0)


# --- Device assignments -------------------------------------------------------

class DeviceTemplatesUpdate(BaseModel):
    """Replace a device's ordered template list."""
    template_ids: list[int] = Field(default_factory=list, max_length=100)


class DeviceTemplatesResponse(BaseModel):
    device_id: str
    templates: list[TemplateResponse]


# --- Desired configuration and overrides ---------------------------------------

class DeviceOverridesUpdate(BaseModel):
    """Override document for PUT (replace) and PATCH (overlay)."""
    config: DeviceConfiguration = Field(default_factory=DeviceConfiguration)


class DeviceConfigResponse(BaseModel):
    """Redacted device configuration; sources maps each set path to its layer."""
    model_config = ConfigDict(from_attributes=True)

    device_id: str
    config: dict
    sources: dict[str, str] = Field(default_factory=dict)
    has_wifi_password: bool = False
    has_mqtt_password: bool = False
    has_auth_password: bool = False
