"""Template View — parse, detect, redact, attach indicators.

Invariants:
    - View config never contains a secret value
    - Indicators reflect the stored payload
    - Unparseable payloads yield config=None and no indicators
    - The source template is never mutated
"""

import json
import logging

from fleetconfig.core.domain_types import ServiceConfigTemplate, TemplateScope
from fleetconfig.core.template_view import build_template_view


def _template(config: str) -> ServiceConfigTemplate:
    return ServiceConfigTemplate(
        id=1, name="Living Room WiFi", scope=TemplateScope.GLOBAL, config=config,
    )


def test_view_is_redacted_with_indicators():
    template = _template(json.dumps({"wifi": {"ssid": "Home", "password": "secret123"}}))

    view = build_template_view(template)

    assert view.scope == "global"
    assert view.config == {"wifi": {"ssid": "Home"}}
    assert view.has_wifi_password is True
    assert view.has_mqtt_password is False
    assert view.has_auth_password is False
    assert "secret123" in template.config


def test_unparseable_payload_fails_open(caplog):
    with caplog.at_level(logging.WARNING):
        view = build_template_view(_template("{broken"))

    assert view.config is None
    assert view.has_wifi_password is None
    assert view.name == "Living Room WiFi"
    assert "{broken" not in caplog.text


def test_empty_payload_has_no_body():
    view = build_template_view(_template(""))
    assert view.config is None
    assert view.has_auth_password is None
