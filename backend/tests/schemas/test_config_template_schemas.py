"""Config Template Schemas — request parsing and response shape.

Invariants:
    - TemplateCreate accepts loose strings; the service enforces name/scope rules
    - TemplateUpdate has no scope/device_type and defaults clear_description to False
    - TemplateResponse reads a TemplateView directly
    - DeviceTemplatesUpdate caps the list length
"""

import pytest
from pydantic import ValidationError

from fleetconfig.core.domain_types import ServiceConfigTemplate, TemplateScope
from fleetconfig.core.template_view import build_template_view
from fleetconfig.schemas.config_template import (
    DeviceTemplatesUpdate, TemplateCreate, TemplateResponse, TemplateUpdate,
)


def test_create_accepts_unknown_scope_string():
    body = TemplateCreate.model_validate({"name": "X", "scope": "planet", "config": {}})
    assert body.scope == "planet"
    assert body.config is not None


def test_create_rejects_overlong_name():
    with pytest.raises(ValidationError):
        TemplateCreate.model_validate({"name": "x" * 256})


def test_update_ignores_immutable_fields():
    body = TemplateUpdate.model_validate({"scope": "group", "device_type": "SHSW-1"})
    assert not hasattr(body, "scope")
    assert body.clear_description is False
    assert body.config is None


def test_response_from_view():
    view = build_template_view(ServiceConfigTemplate(
        id=3,
        name="Broker",
        scope=TemplateScope.GROUP,
        config='{"mqtt":{"server":"b","pass":"m"}}',
    ))

    response = TemplateResponse.model_validate(view).model_dump()

    assert response["id"] == 3
    assert response["scope"] == "group"
    assert response["config"] == {"mqtt": {"server": "b"}}
    assert response["has_mqtt_password"] is True


def test_device_templates_update_limits():
    assert DeviceTemplatesUpdate().template_ids == []
    with pytest.raises(ValidationError):
        DeviceTemplatesUpdate(template_ids=list(range(101)))
