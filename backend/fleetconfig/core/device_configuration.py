"""DeviceConfiguration — nested device settings with the secret-bearing sections typed.

Invariants:
    - Only wifi, mqtt and auth are modelled; every other section (system, cloud,
      coiot, relay, ...) and every unknown field passes through untouched
    - Secret fields are optional strings; "set" means present and non-empty
    - Device firmware spells ap/mqtt/auth secrets "pass"; both spellings fold into
      `password` before validation and the "pass" key is always removed, so a
      secret can never survive as an unredacted extra
    - When both spellings are present the non-empty one wins ("password" on a tie)
    - Stored and outbound documents use the device spelling: ap/mqtt/auth write
      "pass", the Wi-Fi client writes "password"
    - serialize_config/parse_config are the only places template payloads cross
      between structured and serialized form

Design Decisions:
    - extra="allow" on every model: the secret policy knows three sections, not the
      whole device schema
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_core import PydanticSerializationError

DEVICE_SECRET_KEY = "pass"


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class _DeviceSecretSection(_Section):
    """Section whose secret the device firmware calls "pass"."""
    password: str | None = Field(None, serialization_alias=DEVICE_SECRET_KEY)

    @model_validator(mode="before")
    @classmethod
    def fold_device_secret(cls, data: Any) -> Any:
        if not isinstance(data, dict) or DEVICE_SECRET_KEY not in data:
            return data
        data = dict(data)
        device_value = data.pop(DEVICE_SECRET_KEY)
        if not data.get("password") and device_value is not None:
            if device_value or "password" not in data:
                data["password"] = device_value
        return data


class AccessPointConfiguration(_DeviceSecretSection):
    """Device's own access point (AP mode)."""
    enable: bool | None = None
    ssid: str | None = None


class WiFiConfiguration(_Section):
    """Wi-Fi client settings, with an optional access point."""
    enable: bool | None = None
    ssid: str | None = None
    password: str | None = None
    ap: AccessPointConfiguration | None = None


class MQTTConfiguration(_DeviceSecretSection):
    enable: bool | None = None
    server: str | None = None
    user: str | None = None


class AuthConfiguration(_DeviceSecretSection):
    enable: bool | None = None
    user: str | None = None


class DeviceConfiguration(_Section):
    """Full device configuration payload stored on a template."""
    wifi: WiFiConfiguration | None = None
    mqtt: MQTTConfiguration | None = None
    auth: AuthConfiguration | None = None


class ConfigSerializationError(Exception):
    """Raised when a DeviceConfiguration cannot be serialized for storage."""


def serialize_config(config: DeviceConfiguration) -> str:
    """Serialize once for storage, in the device spelling. Unset fields are omitted."""
    try:
        return config.model_dump_json(exclude_none=True, by_alias=True)
    except PydanticSerializationError as e:
        raise ConfigSerializationError(str(e)) from e


def parse_config(raw: str | None) -> DeviceConfiguration | None:
    """Parse a stored payload. Returns None when empty or unparseable."""
    if not raw:
        return None
    try:
        return DeviceConfiguration.model_validate_json(raw)
    except ValidationError:
        return None


def config_to_dict(config: DeviceConfiguration) -> dict:
    """JSON-compatible dict in the device spelling, for outbound representations."""
    return config.model_dump(mode="json", exclude_none=True, by_alias=True)
