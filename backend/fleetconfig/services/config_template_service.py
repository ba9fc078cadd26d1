"""Config Template Service — template lifecycle, safe deletion, assignments, desired config.

Invariants:
    - Sole owner of template lifecycle rules; routes never touch stores directly
    - Validation and not-found are raised before any store write
    - Config is serialized exactly once per write, before merge; a serialization
      failure leaves the store untouched
    - Every template leaving this service is a TemplateView (parsed → detected → redacted)
    - delete never cascades: assigned templates raise TemplateAssignedError
    - scope and device_type are immutable after creation
    - Desired config is resolved on every read from the device's templates, in
      assignment order, then its overrides; nothing derived is stored
    - An override document that serializes to {} is stored as "no overrides"

Design Decisions:
    - Stores injected as protocols: the same service runs against SQL or an in-memory fake
    - Delete's check-then-remove is not atomic. Where the database enforces the
      assignment foreign key, a device assigned in between makes the delete fail
      with DatabaseError (503) and the template survives; without enforcement
      (SQLite by default) the assignment dangles and device reads skip it
    - Assignment operations only record which devices use which templates; pushing
      configuration to devices happens elsewhere
"""

import logging

from fleetconfig.core.desired_config_view import (
    DeviceConfigView, build_config_view, build_desired_config_view,
)
from fleetconfig.core.device_configuration import (
    ConfigSerializationError, DeviceConfiguration, parse_config, serialize_config,
)
from fleetconfig.core.domain_types import (
    DeviceId, ServiceConfigTemplate, TemplateId,
)
from fleetconfig.core.errors import (
    ErrorContext, InternalError, ResourceNotFoundError, TemplateAssignedError,
)
from fleetconfig.core.merge_layers import (
    DEVICE_OVERRIDE_LAYER, ConfigLayer, merge_layers,
)
from fleetconfig.core.merge_template import TemplatePatch, merge_template
from fleetconfig.core.repository_protocols import DeviceAssignmentStore, TemplateStore
from fleetconfig.core.template_view import TemplateView, build_template_view
from fleetconfig.core.validate_template import (
    check_scope, is_blank, validate_new_template,
)

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    return None if is_blank(value) else value.strip()


class ConfigTemplateService:
    """Template CRUD, device assignments, overrides and desired-config resolution."""

    def __init__(self, store: TemplateStore, assignments: DeviceAssignmentStore):
        self.store = store
        self.assignments = assignments

    # ─── Queries ─────────────────────────────────────────────────

    async def list_templates(self, scope: str | None = None) -> list[TemplateView]:
        """All templates, or only those in `scope` when given."""
        scope_filter = None if is_blank(scope) else check_scope(scope)
        templates = await self.store.list_templates(scope_filter)
        return [build_template_view(t) for t in templates]

    async def list_templates_for_device_type(self, device_type: str) -> list[TemplateView]:
        templates = await self.store.list_by_device_type(device_type.strip())
        return [build_template_view(t) for t in templates]

    async def get_template(self, template_id: TemplateId) -> TemplateView:
        return build_template_view(await self.store.get(template_id))

    async def get_affected_devices(self, template_id: TemplateId) -> set[DeviceId]:
        """Devices currently assigned the template. Raises if the template is unknown."""
        await self.store.get(template_id)
        return await self.assignments.affected_devices(template_id)

    # ─── Template lifecycle ──────────────────────────────────────

    async def create_template(
        self,
        name: str | None,
        scope: str | None,
        config: DeviceConfiguration | None,
        description: str | None = None,
        device_type: str | None = None,
    ) -> TemplateView:
        parsed_scope = validate_new_template(name, scope, device_type, config)
        template = ServiceConfigTemplate(
            name=name.strip(),
            description=_clean(description),
            scope=parsed_scope,
            device_type=_clean(device_type),
            config=self._serialize(config, "create"),
        )
        template_id = await self.store.insert(template)
        stored = await self.store.get(template_id)

        logger.info(
            "Template created",
            extra={
                "template_id": stored.id,
                "template_name": stored.name,
                "scope": stored.scope.value,
            },
        )
        return build_template_view(stored)

    async def update_template(
        self,
        template_id: TemplateId,
        name: str | None = None,
        description: str | None = None,
        config: DeviceConfiguration | None = None,
        clear_description: bool = False,
    ) -> tuple[TemplateView, int]:
        """Merge the given fields onto the template; returns (view, affected device count)."""
        existing = await self.store.get(template_id)
        patch = TemplatePatch(
            name=name,
            description=description,
            config=(
                self._serialize(config, "update", template_id)
                if config is not None else None
            ),
            clear_description=clear_description,
        )
        saved = await self.store.save(merge_template(existing, patch))
        affected = await self.assignments.affected_devices(template_id)

        logger.info(
            "Template updated",
            extra={
                "template_id": saved.id,
                "template_name": saved.name,
                "affected_devices": len(affected),
            },
        )
        return build_template_view(saved), len(affected)

    async def delete_template(self, template_id: TemplateId) -> None:
        await self.store.get(template_id)
        affected = await self.assignments.affected_devices(template_id)
        if affected:
            raise TemplateAssignedError(template_id, len(affected))

        await self.store.remove(template_id)
        logger.info("Template deleted", extra={"template_id": template_id})

    # ─── Device assignments ──────────────────────────────────────

    async def get_device_templates(self, device_id: DeviceId) -> list[TemplateView]:
        """Templates assigned to the device, in order. Ids that no longer resolve are skipped."""
        views = []
        for template_id in await self.assignments.get_device_template_ids(device_id):
            try:
                template = await self.store.get(template_id)
            except ResourceNotFoundError:
                logger.warning(
                    "Device references a missing template",
                    extra={"device_id": device_id, "template_id": template_id},
                )
                continue
            views.append(build_template_view(template))
        return views

    async def set_device_templates(
        self, device_id: DeviceId, template_ids: list[TemplateId],
    ) -> list[TemplateView]:
        """Replace the device's template list. Every id must exist; duplicates collapse."""
        ordered = list(dict.fromkeys(template_ids))
        for template_id in ordered:
            await self._require_template(template_id, device_id)
        await self.assignments.set_device_template_ids(device_id, ordered)

        logger.info(
            "Device templates updated",
            extra={"device_id": device_id, "template_count": len(ordered)},
        )
        return await self.get_device_templates(device_id)

    async def add_template_to_device(
        self,
        device_id: DeviceId,
        template_id: TemplateId,
        position: int | None = None,
    ) -> list[TemplateView]:
        """Insert at `position` when in range, else append. No-op if already assigned."""
        await self._require_template(template_id, device_id)
        current = await self.assignments.get_device_template_ids(device_id)
        if template_id in current:
            return await self.get_device_templates(device_id)

        if position is None or position < 0 or position >= len(current):
            current.append(template_id)
        else:
            current.insert(position, template_id)
        return await self.set_device_templates(device_id, current)

    async def remove_template_from_device(
        self, device_id: DeviceId, template_id: TemplateId,
    ) -> list[TemplateView]:
        current = await self.assignments.get_device_template_ids(device_id)
        if template_id not in current:
            return await self.get_device_templates(device_id)
        await self.assignments.set_device_template_ids(
            device_id, [tid for tid in current if tid != template_id],
        )
        logger.info(
            "Template removed from device",
            extra={"device_id": device_id, "template_id": template_id},
        )
        return await self.get_device_templates(device_id)

    # ─── Desired configuration ───────────────────────────────────

    async def get_desired_config(self, device_id: DeviceId) -> DeviceConfigView:
        """Merge the device's templates in order, then its overrides. Later layers win."""
        layers = []
        for template_id in await self.assignments.get_device_template_ids(device_id):
            try:
                template = await self.store.get(template_id)
            except ResourceNotFoundError:
                logger.warning(
                    "Device references a missing template",
                    extra={"device_id": device_id, "template_id": template_id},
                )
                continue
            config = parse_config(template.config)
            if config is None:
                logger.warning(
                    "Skipping template with unparseable config",
                    extra={"device_id": device_id, "template_id": template_id},
                )
                continue
            layers.append(ConfigLayer(template.name, config))

        overrides = await self._load_overrides(device_id)
        if overrides is not None:
            layers.append(ConfigLayer(DEVICE_OVERRIDE_LAYER, overrides))
        return build_desired_config_view(device_id, merge_layers(layers))

    async def get_device_overrides(self, device_id: DeviceId) -> DeviceConfigView:
        overrides = await self._load_overrides(device_id)
        return build_config_view(device_id, overrides or DeviceConfiguration())

    async def set_device_overrides(
        self, device_id: DeviceId, config: DeviceConfiguration,
    ) -> DeviceConfigView:
        """Replace the device's overrides. An empty document clears them."""
        raw = self._serialize(config, "set_device_overrides")
        await self.assignments.set_device_overrides(
            device_id, None if raw == "{}" else raw,
        )
        logger.info("Device overrides replaced", extra={"device_id": device_id})
        return await self.get_device_overrides(device_id)

    async def patch_device_overrides(
        self, device_id: DeviceId, patch: DeviceConfiguration,
    ) -> DeviceConfigView:
        """Overlay `patch` onto the current overrides; values it leaves unset are kept."""
        current = await self._load_overrides(device_id)
        merged = merge_layers([
            ConfigLayer(DEVICE_OVERRIDE_LAYER, current),
            ConfigLayer("patch", patch),
        ])
        raw = self._serialize(merged.config, "patch_device_overrides")
        await self.assignments.set_device_overrides(
            device_id, None if raw == "{}" else raw,
        )
        logger.info(
            "Device overrides patched",
            extra={"device_id": device_id, "override_fields": len(merged.sources)},
        )
        return await self.get_device_overrides(device_id)

    async def clear_device_overrides(self, device_id: DeviceId) -> None:
        await self.assignments.set_device_overrides(device_id, None)
        logger.info("Device overrides cleared", extra={"device_id": device_id})

    # ─── Helpers ─────────────────────────────────────────────────

    async def _load_overrides(self, device_id: DeviceId) -> DeviceConfiguration | None:
        raw = await self.assignments.get_device_overrides(device_id)
        config = parse_config(raw)
        if config is None and raw:
            logger.warning(
                "Stored device overrides could not be parsed; ignoring them",
                extra={"device_id": device_id},
            )
        return config

    async def _require_template(self, template_id: TemplateId, device_id: DeviceId) -> None:
        try:
            await self.store.get(template_id)
        except ResourceNotFoundError as e:
            e.context.device_id = device_id
            raise

    @staticmethod
    def _serialize(
        config: DeviceConfiguration,
        operation: str,
        template_id: TemplateId | None = None,
    ) -> str:
        try:
            return serialize_config(config)
        except ConfigSerializationError as e:
            logger.error(
                f"Failed to serialize template config: {e}",
                extra={"operation": operation, "template_id": template_id},
            )
            raise InternalError(
                "serialize_config",
                ErrorContext(template_id=template_id, operation=operation),
            ) from e
