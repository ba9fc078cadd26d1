"""ConfigTemplateService — template lifecycle against in-memory stores.

Invariants:
    - Created templates are returned redacted, with secret indicators
    - Validation and not-found failures happen before any store write
    - Partial update: omitted/blank fields unchanged, scope/device_type immutable
    - Update reports the number of devices currently assigned the template
    - Delete refuses assigned templates (409 with device_count) and never cascades
    - Unparseable stored payloads are returned without a config body
"""

import json

import pytest

from fleetconfig.core.device_configuration import DeviceConfiguration
from fleetconfig.core.domain_types import ServiceConfigTemplate, TemplateScope
from fleetconfig.core.errors import (
    InternalError, ResourceNotFoundError, TemplateAssignedError,
    TemplateValidationError,
)


def _config(**sections) -> DeviceConfiguration:
    return DeviceConfiguration.model_validate(sections)


def _seed(store, template_id, config=None, **fields):
    defaults = {
        "name": f"Template {template_id}",
        "scope": TemplateScope.GLOBAL,
        "config": json.dumps(config if config is not None else {}),
    }
    defaults.update(fields)
    return store.put(ServiceConfigTemplate(id=template_id, **defaults))


# ─── Create ──────────────────────────────────────────────────────

async def test_create_returns_redacted_view_with_indicators(service, template_store):
    view = await service.create_template(
        name="Living Room WiFi",
        scope="global",
        config=_config(wifi={"ssid": "Home", "password": "secret123"}),
    )

    assert view.id == 1
    assert view.name == "Living Room WiFi"
    assert view.scope == "global"
    assert view.config == {"wifi": {"ssid": "Home"}}
    assert view.has_wifi_password is True
    assert view.has_mqtt_password is False
    assert view.has_auth_password is False
    assert view.created_at is not None
    assert view.updated_at is not None


async def test_create_stores_secret_intact(service, template_store):
    """Redaction is an outbound concern; the stored payload keeps the secret."""
    await service.create_template(
        name="Living Room WiFi",
        scope="global",
        config=_config(wifi={"ssid": "Home", "password": "secret123"}),
    )

    stored = json.loads(template_store.templates[1].config)
    assert stored["wifi"]["password"] == "secret123"


async def test_create_strips_name_and_blank_description(service, template_store):
    view = await service.create_template(
        name="  Office  ", scope="group", config=_config(), description="   ",
    )
    assert view.name == "Office"
    assert view.description is None


async def test_create_device_type_scope_keeps_device_type(service):
    view = await service.create_template(
        name="Plugs", scope="device_type", config=_config(),
        device_type="SHPLG-S",
    )
    assert view.scope == "device_type"
    assert view.device_type == "SHPLG-S"


async def test_create_invalid_scope_writes_nothing(service, template_store):
    with pytest.raises(TemplateValidationError) as exc_info:
        await service.create_template(
            name="X", scope="planet", config=_config(),
        )
    assert exc_info.value.message == "invalid scope"
    assert template_store.writes == []


async def test_create_validation_order_name_first(service, template_store):
    with pytest.raises(TemplateValidationError) as exc_info:
        await service.create_template(name="", scope="planet", config=None)
    assert exc_info.value.message == "name is required"
    assert template_store.writes == []


async def test_create_device_type_scope_requires_device_type(service, template_store):
    with pytest.raises(TemplateValidationError) as exc_info:
        await service.create_template(
            name="Plugs", scope="device_type", config=_config(), device_type=" ",
        )
    assert exc_info.value.message == "device type required"
    assert template_store.writes == []


async def test_create_requires_config(service, template_store):
    with pytest.raises(TemplateValidationError) as exc_info:
        await service.create_template(name="X", scope="global", config=None)
    assert exc_info.value.message == "config is required"
    assert template_store.writes == []


async def test_create_serialization_failure_raises_internal_error(
    service, template_store, monkeypatch,
):
    from fleetconfig.core.device_configuration import ConfigSerializationError

    def _boom(config):
        raise ConfigSerializationError("cannot serialize")

    monkeypatch.setattr(
        "fleetconfig.services.config_template_service.serialize_config", _boom,
    )
    with pytest.raises(InternalError) as exc_info:
        await service.create_template(name="X", scope="global", config=_config())
    assert exc_info.value.http_status == 500
    assert template_store.writes == []


# ─── Read ────────────────────────────────────────────────────────

async def test_get_missing_template_raises_not_found(service):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await service.get_template(99)
    assert exc_info.value.http_status == 404
    assert exc_info.value.context.template_id == 99


async def test_get_redacts_every_secret_section(service, template_store):
    _seed(template_store, 3, config={
        "wifi": {"ssid": "Home", "password": "a", "ap": {"ssid": "AP", "pass": "b"}},
        "mqtt": {"server": "broker:1883", "user": "u", "pass": "c"},
        "auth": {"enable": True, "user": "admin", "password": "d"},
        "sys": {"device": {"name": "kitchen"}},
    })

    view = await service.get_template(3)

    assert view.config == {
        "wifi": {"ssid": "Home", "ap": {"ssid": "AP"}},
        "mqtt": {"server": "broker:1883", "user": "u"},
        "auth": {"enable": True, "user": "admin"},
        "sys": {"device": {"name": "kitchen"}},
    }
    assert (view.has_wifi_password, view.has_mqtt_password, view.has_auth_password) == (
        True, True, True,
    )


async def test_get_unparseable_payload_fails_open(service, template_store):
    _seed(template_store, 4, config=None)
    template_store.templates[4].config = "{not json"

    view = await service.get_template(4)

    assert view.id == 4
    assert view.config is None
    assert view.has_wifi_password is None
    assert view.has_mqtt_password is None
    assert view.has_auth_password is None


async def test_list_filters_by_scope(service, template_store):
    _seed(template_store, 1, scope=TemplateScope.GLOBAL)
    _seed(template_store, 2, scope=TemplateScope.GROUP)
    _seed(template_store, 3, scope=TemplateScope.GLOBAL)

    assert [v.id for v in await service.list_templates()] == [1, 2, 3]
    assert [v.id for v in await service.list_templates("global")] == [1, 3]
    assert [v.id for v in await service.list_templates("  ")] == [1, 2, 3]


async def test_list_invalid_scope_raises_validation(service):
    with pytest.raises(TemplateValidationError):
        await service.list_templates("planet")


async def test_list_for_device_type(service, template_store):
    _seed(template_store, 1, scope=TemplateScope.DEVICE_TYPE, device_type="SHSW-1")
    _seed(template_store, 2, scope=TemplateScope.DEVICE_TYPE, device_type="SHPLG-S")

    views = await service.list_templates_for_device_type("SHSW-1")
    assert [v.id for v in views] == [1]


async def test_affected_devices_requires_existing_template(service):
    with pytest.raises(ResourceNotFoundError):
        await service.get_affected_devices(42)


# ─── Update ──────────────────────────────────────────────────────

async def test_update_name_reports_affected_devices(
    service, template_store, assignment_store,
):
    _seed(template_store, 5, name="Old", description="keep me",
          config={"mqtt": {"server": "b", "password": "x"}})
    assignment_store.assign(5, "dev-a", "dev-b", "dev-c")

    view, affected = await service.update_template(5, name="New")

    assert affected == 3
    assert view.name == "New"
    assert view.description == "keep me"
    assert view.has_mqtt_password is True
    assert view.config == {"mqtt": {"server": "b"}}


async def test_update_description_only_leaves_rest(service, template_store):
    original = _seed(template_store, 6, name="Keep", scope=TemplateScope.GROUP,
                     config={"wifi": {"ssid": "A"}})

    view, affected = await service.update_template(6, description="Now described")

    assert affected == 0
    assert view.name == "Keep"
    assert view.scope == "group"
    assert view.description == "Now described"
    assert template_store.templates[6].config == original.config


async def test_update_advances_updated_at(service, template_store):
    original = _seed(template_store, 6)
    view, _ = await service.update_template(6, name="Renamed")
    assert view.updated_at > original.updated_at
    assert view.created_at == original.created_at


async def test_update_blank_name_is_unchanged(service, template_store):
    _seed(template_store, 6, name="Keep")
    view, _ = await service.update_template(6, name="   ")
    assert view.name == "Keep"


async def test_update_clear_description(service, template_store):
    _seed(template_store, 6, description="remove me")
    view, _ = await service.update_template(6, clear_description=True)
    assert view.description is None


async def test_update_replaces_config(service, template_store):
    _seed(template_store, 6, config={"wifi": {"ssid": "A", "password": "x"}})

    view, _ = await service.update_template(
        6, config=_config(auth={"user": "admin", "password": "y"}),
    )

    assert view.config == {"auth": {"user": "admin"}}
    assert view.has_wifi_password is False
    assert view.has_auth_password is True


async def test_update_missing_template_writes_nothing(service, template_store):
    with pytest.raises(ResourceNotFoundError):
        await service.update_template(99, name="X")
    assert template_store.writes == []


# ─── Delete ──────────────────────────────────────────────────────

async def test_delete_assigned_template_conflicts(
    service, template_store, assignment_store,
):
    _seed(template_store, 7)
    assignment_store.assign(7, "dev-a", "dev-b")

    with pytest.raises(TemplateAssignedError) as exc_info:
        await service.delete_template(7)

    assert exc_info.value.http_status == 409
    assert exc_info.value.details == {"device_count": 2}
    assert 7 in template_store.templates
    assert assignment_store.devices == {"dev-a": [7], "dev-b": [7]}


async def test_delete_unassigned_template(service, template_store):
    _seed(template_store, 8)
    await service.delete_template(8)
    assert 8 not in template_store.templates
    assert template_store.writes == [("remove", 8)]


async def test_delete_missing_template(service, template_store):
    with pytest.raises(ResourceNotFoundError):
        await service.delete_template(99)
    assert template_store.writes == []


async def test_create_with_both_secret_spellings_reports_secret(
    service, template_store,
):
    view = await service.create_template(
        name="Broker",
        scope="global",
        config=DeviceConfiguration.model_validate(
            {"mqtt": {"password": "", "pass": "hunter2"}},
        ),
    )

    assert json.loads(template_store.templates[view.id].config) == {
        "mqtt": {"pass": "hunter2"},
    }
    assert view.config == {"mqtt": {}}
    assert view.has_mqtt_password is True
