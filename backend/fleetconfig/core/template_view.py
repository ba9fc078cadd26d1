"""Template View — the only outbound representation of a stored template.

Invariants:
    - build_template_view parses → detects → redacts → attaches indicators, in that order
    - An unparseable payload yields config=None and all indicators None (fail-open
      on display; stored bytes are never echoed)
    - The input ServiceConfigTemplate is never mutated
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from fleetconfig.core.device_configuration import config_to_dict, parse_config
from fleetconfig.core.domain_types import ServiceConfigTemplate
from fleetconfig.core.redact_secrets import detect_secrets, redact_secrets

logger = logging.getLogger(__name__)


@dataclass
class TemplateView:
    """Redacted template plus secret presence indicators."""
    id: int
    name: str
    description: str | None
    scope: str
    device_type: str | None
    config: dict | None
    created_at: datetime | None
    updated_at: datetime | None
    has_wifi_password: bool | None = None
    has_mqtt_password: bool | None = None
    has_auth_password: bool | None = None


def build_template_view(template: ServiceConfigTemplate) -> TemplateView:
    view = TemplateView(
        id=template.id,
        name=template.name,
        description=template.description,
        scope=template.scope.value,
        device_type=template.device_type,
        config=None,
        created_at=template.created_at,
        updated_at=template.updated_at,
    )
    config = parse_config(template.config)
    if config is None:
        if template.config:
            logger.warning(
                "Stored template config could not be parsed; returning without body",
                extra={"template_id": template.id},
            )
        return view

    indicators = detect_secrets(config)
    redact_secrets(config)
    view.config = config_to_dict(config)
    view.has_wifi_password = indicators.has_wifi_password
    view.has_mqtt_password = indicators.has_mqtt_password
    view.has_auth_password = indicators.has_auth_password
    return view
