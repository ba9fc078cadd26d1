"""SQL Template Store — SQLAlchemy implementation of the TemplateStore protocol.

Invariants:
    - Every write commits; a failed write rolls back before raising
    - Missing ids raise ResourceNotFoundError, never return None
    - Ids outside the INTEGER column range are missing ids: they never reach the driver
    - SQLAlchemyError is logged with operation + template_id and re-raised as DatabaseError
    - save() advances updated_at strictly, even within one clock tick
    - Timestamps leave the store timezone-aware (UTC), whatever the driver returns

Design Decisions:
    - One AsyncSession per request, injected by the route dependency
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetconfig.core.domain_types import (
    ServiceConfigTemplate, TemplateId, TemplateScope,
)
from fleetconfig.core.errors import (
    DatabaseError, ErrorContext, ResourceNotFoundError,
)
from fleetconfig.models.config_template import ConfigTemplate

logger = logging.getLogger(__name__)

MAX_TEMPLATE_ID = 2**31 - 1


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on the way back; stored values are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def next_timestamp(previous: datetime | None) -> datetime:
    now = datetime.now(timezone.utc)
    previous = as_utc(previous)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _to_domain(row: ConfigTemplate) -> ServiceConfigTemplate:
    return ServiceConfigTemplate(
        id=TemplateId(row.id),
        name=row.name,
        description=row.description,
        scope=TemplateScope(row.scope),
        device_type=row.device_type,
        config=row.config,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class SqlTemplateStore:
    """Template persistence backed by the config_templates table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _operation(
        self, operation: str, template_id: int | None = None,
    ) -> AsyncGenerator[None, None]:
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Template store {operation} failed: {e}",
                extra={"operation": operation, "template_id": template_id},
                exc_info=True,
            )
            raise DatabaseError(
                operation,
                ErrorContext(template_id=template_id, operation=operation),
            ) from e

    async def _get_row(self, template_id: int) -> ConfigTemplate:
        row = None
        if 1 <= template_id <= MAX_TEMPLATE_ID:
            row = await self.db.get(ConfigTemplate, template_id)
        if row is None:
            raise ResourceNotFoundError(
                "Template", template_id, ErrorContext(template_id=template_id),
            )
        return row

    async def list_templates(
        self, scope: TemplateScope | None = None,
    ) -> list[ServiceConfigTemplate]:
        query = select(ConfigTemplate).order_by(ConfigTemplate.id)
        if scope is not None:
            query = query.where(ConfigTemplate.scope == scope.value)
        async with self._operation("list"):
            result = await self.db.execute(query)
            return [_to_domain(row) for row in result.scalars().all()]

    async def list_by_device_type(
        self, device_type: str,
    ) -> list[ServiceConfigTemplate]:
        query = (
            select(ConfigTemplate)
            .where(ConfigTemplate.device_type == device_type)
            .order_by(ConfigTemplate.id)
        )
        async with self._operation("list_by_device_type"):
            result = await self.db.execute(query)
            return [_to_domain(row) for row in result.scalars().all()]

    async def get(self, template_id: TemplateId) -> ServiceConfigTemplate:
        async with self._operation("get", template_id):
            return _to_domain(await self._get_row(template_id))

    async def insert(self, template: ServiceConfigTemplate) -> TemplateId:
        now = datetime.now(timezone.utc)
        row = ConfigTemplate(
            name=template.name,
            description=template.description,
            scope=template.scope.value,
            device_type=template.device_type,
            config=template.config,
            created_at=now,
            updated_at=now,
        )
        async with self._operation("insert"):
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
            return TemplateId(row.id)

    async def save(self, template: ServiceConfigTemplate) -> ServiceConfigTemplate:
        async with self._operation("save", template.id):
            row = await self._get_row(template.id)
            row.name = template.name
            row.description = template.description
            row.scope = template.scope.value
            row.device_type = template.device_type
            row.config = template.config
            row.updated_at = next_timestamp(row.updated_at)
            await self.db.commit()
            await self.db.refresh(row)
            return _to_domain(row)

    async def remove(self, template_id: TemplateId) -> None:
        async with self._operation("remove", template_id):
            row = await self._get_row(template_id)
            await self.db.delete(row)
            await self.db.commit()
