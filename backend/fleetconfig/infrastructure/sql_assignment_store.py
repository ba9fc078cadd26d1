"""SQL Assignment Store — SQLAlchemy implementation of the DeviceAssignmentStore protocol.

Invariants:
    - A device's template list is its rows ordered by position
    - set_device_template_ids replaces the whole list in one commit
    - Unknown devices simply have no rows (empty list / empty set / None), never an error
    - Overrides are one row per device; setting None deletes the row
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetconfig.core.domain_types import DeviceId, TemplateId
from fleetconfig.core.errors import DatabaseError, ErrorContext
from fleetconfig.models.device_config_override import DeviceConfigOverride
from fleetconfig.models.device_template_assignment import DeviceTemplateAssignment

logger = logging.getLogger(__name__)


class SqlDeviceAssignmentStore:
    """Device → template bookkeeping backed by device_template_assignments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fail(self, operation: str, error: SQLAlchemyError, **ids) -> DatabaseError:
        await self.db.rollback()
        logger.error(
            f"Assignment store {operation} failed: {error}",
            extra={"operation": operation, **ids},
            exc_info=True,
        )
        return DatabaseError(operation, ErrorContext(operation=operation, **ids))

    async def affected_devices(self, template_id: TemplateId) -> set[DeviceId]:
        query = select(DeviceTemplateAssignment.device_id).where(
            DeviceTemplateAssignment.template_id == template_id,
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise await self._fail("affected_devices", e, template_id=template_id) from e
        return {DeviceId(device_id) for device_id in result.scalars().all()}

    async def get_device_template_ids(self, device_id: DeviceId) -> list[TemplateId]:
        query = (
            select(DeviceTemplateAssignment.template_id)
            .where(DeviceTemplateAssignment.device_id == device_id)
            .order_by(DeviceTemplateAssignment.position)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise await self._fail("get_device_templates", e, device_id=device_id) from e
        return [TemplateId(tid) for tid in result.scalars().all()]

    async def set_device_template_ids(
        self, device_id: DeviceId, template_ids: list[TemplateId],
    ) -> None:
        try:
            await self.db.execute(
                delete(DeviceTemplateAssignment).where(
                    DeviceTemplateAssignment.device_id == device_id,
                ),
            )
            self.db.add_all([
                DeviceTemplateAssignment(
                    device_id=device_id, template_id=tid, position=position,
                )
                for position, tid in enumerate(template_ids)
            ])
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("set_device_templates", e, device_id=device_id) from e

    async def get_device_overrides(self, device_id: DeviceId) -> str | None:
        try:
            row = await self.db.get(DeviceConfigOverride, device_id)
        except SQLAlchemyError as e:
            raise await self._fail("get_device_overrides", e, device_id=device_id) from e
        return row.config if row is not None else None

    async def set_device_overrides(
        self, device_id: DeviceId, config: str | None,
    ) -> None:
        try:
            row = await self.db.get(DeviceConfigOverride, device_id)
            if config is None:
                if row is not None:
                    await self.db.delete(row)
            elif row is None:
                self.db.add(DeviceConfigOverride(device_id=device_id, config=config))
            else:
                row.config = config
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("set_device_overrides", e, device_id=device_id) from e
