"""Boundary Protocols — contracts between the template service and persistence.

Invariants:
    - Service NEVER imports a concrete store; dependency arrows point inward only
    - get/save/remove raise ResourceNotFoundError for unknown ids (never return None)
    - insert returns the store-assigned id; the store owns created_at/updated_at
    - save advances updated_at strictly
    - list_templates preserves insertion order
    - Device overrides are serialized documents; None means the device has none

Design Decisions:
    - Protocol over ABC: structural subtyping, the in-memory test fake needs no base class
    - Assignment bookkeeping is a separate protocol: the template store knows nothing
      about devices
"""

from typing import Protocol

from fleetconfig.core.domain_types import (
    DeviceId, ServiceConfigTemplate, TemplateId, TemplateScope,
)


class TemplateStore(Protocol):
    """Contract for template persistence — implemented by shell."""
    async def list_templates(
        self, scope: TemplateScope | None = None,
    ) -> list[ServiceConfigTemplate]: ...
    async def list_by_device_type(
        self, device_type: str,
    ) -> list[ServiceConfigTemplate]: ...
    async def get(self, template_id: TemplateId) -> ServiceConfigTemplate: ...
    async def insert(self, template: ServiceConfigTemplate) -> TemplateId: ...
    async def save(self, template: ServiceConfigTemplate) -> ServiceConfigTemplate: ...
    async def remove(self, template_id: TemplateId) -> None: ...


class DeviceAssignmentStore(Protocol):
    """Contract for per-device bookkeeping (template assignments, overrides) — implemented by shell."""
    async def affected_devices(self, template_id: TemplateId) -> set[DeviceId]: ...
    async def get_device_template_ids(self, device_id: DeviceId) -> list[TemplateId]: ...
    async def set_device_template_ids(
        self, device_id: DeviceId, template_ids: list[TemplateId],
    ) -> None: ...
    async def get_device_overrides(self, device_id: DeviceId) -> str | None: ...
    async def set_device_overrides(
        self, device_id: DeviceId, config: str | None,
    ) -> None: ...
