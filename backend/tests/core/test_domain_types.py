"""Domain Types — verifies identity wrappers and scope parsing.

Tests:
    - NewType wrappers are transparent at runtime
    - TemplateScope has exactly three members that serialize to strings
    - parse() accepts surrounding whitespace and rejects unknown/empty values
"""

from fleetconfig.core.domain_types import (
    DeviceId, ServiceConfigTemplate, TemplateId, TemplateScope,
)


def test_identity_types_wrap_primitives():
    assert TemplateId(5) == 5
    assert DeviceId("shellyplug-s-7A3B") == "shellyplug-s-7A3B"


def test_template_scope_has_three_members():
    assert {s.value for s in TemplateScope} == {"global", "group", "device_type"}


def test_parse_known_scopes():
    assert TemplateScope.parse("global") is TemplateScope.GLOBAL
    assert TemplateScope.parse(" device_type ") is TemplateScope.DEVICE_TYPE


def test_parse_rejects_unknown_and_empty():
    assert TemplateScope.parse("planet") is None
    assert TemplateScope.parse("GLOBAL") is None
    assert TemplateScope.parse("") is None
    assert TemplateScope.parse(None) is None


def test_template_defaults():
    template = ServiceConfigTemplate(
        name="t", scope=TemplateScope.GROUP, config="{}",
    )
    assert template.id is None
    assert template.description is None
    assert template.device_type is None
