"""Desired Config View — outbound representation of a device's resolved configuration.

Invariants:
    - Secrets are detected on the merged configuration, then redacted, in that order
    - sources is copied as-is; it names paths and layers, never values
    - The MergeResult's configuration is redacted in place; callers pass a fresh result
"""

from dataclasses import dataclass, field

from fleetconfig.core.device_configuration import DeviceConfiguration, config_to_dict
from fleetconfig.core.merge_layers import MergeResult
from fleetconfig.core.redact_secrets import detect_secrets, redact_secrets


@dataclass
class DeviceConfigView:
    device_id: str
    config: dict
    sources: dict[str, str] = field(default_factory=dict)
    has_wifi_password: bool = False
    has_mqtt_password: bool = False
    has_auth_password: bool = False


def build_config_view(
    device_id: str, config: DeviceConfiguration, sources: dict[str, str] | None = None,
) -> DeviceConfigView:
    indicators = detect_secrets(config)
    redact_secrets(config)
    return DeviceConfigView(
        device_id=device_id,
        config=config_to_dict(config),
        sources=dict(sources or {}),
        has_wifi_password=indicators.has_wifi_password,
        has_mqtt_password=indicators.has_mqtt_password,
        has_auth_password=indicators.has_auth_password,
    )


def build_desired_config_view(device_id: str, result: MergeResult) -> DeviceConfigView:
    """Redacted merged configuration plus the layer that set each path."""
    return build_config_view(device_id, result.config, result.sources)
