"""Secret Redaction — detects and strips credential material from device configurations.

Invariants:
    - All functions are PURE except redact_secrets, which mutates only its argument
    - Secret fields: wifi.password, wifi.ap.password, mqtt.password, auth.password
    - Detection runs BEFORE redaction on the same parsed structure
    - redact_secrets is idempotent: redact(redact(cfg)) == redact(cfg)
    - Presence is exposed only as booleans, never the value, partial or hashed

Design Decisions:
    - This module is the single place that knows what a secret is; adding a secret
      field means touching only detect/redact here
"""

from dataclasses import dataclass

from fleetconfig.core.device_configuration import DeviceConfiguration


@dataclass(frozen=True)
class SecretIndicators:
    """Per-section secret presence flags."""
    has_wifi_password: bool
    has_mqtt_password: bool
    has_auth_password: bool


def _is_set(value: str | None) -> bool:
    return value is not None and value != ""


def has_wifi_secret(config: DeviceConfiguration) -> bool:
    """True if the Wi-Fi client password or the access-point password is set."""
    wifi = config.wifi
    if wifi is None:
        return False
    if _is_set(wifi.password):
        return True
    return wifi.ap is not None and _is_set(wifi.ap.password)


def has_mqtt_secret(config: DeviceConfiguration) -> bool:
    return config.mqtt is not None and _is_set(config.mqtt.password)


def has_auth_secret(config: DeviceConfiguration) -> bool:
    return config.auth is not None and _is_set(config.auth.password)


def detect_secrets(config: DeviceConfiguration) -> SecretIndicators:
    """Snapshot presence flags. Must be called before redact_secrets."""
    return SecretIndicators(
        has_wifi_password=has_wifi_secret(config),
        has_mqtt_password=has_mqtt_secret(config),
        has_auth_password=has_auth_secret(config),
    )


def redact_secrets(config: DeviceConfiguration) -> DeviceConfiguration:
    """Clear every secret field in place and return the same object."""
    if config.wifi is not None:
        config.wifi.password = None
        if config.wifi.ap is not None:
            config.wifi.ap.password = None
    if config.mqtt is not None:
        config.mqtt.password = None
    if config.auth is not None:
        config.auth.password = None
    return config
