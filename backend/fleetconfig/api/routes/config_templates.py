"""Config Template Routes — HTTP adapter over ConfigTemplateService.

Invariants:
    - Routes contain no business logic: decode, call the service, encode
    - Every template in a response body comes from a TemplateView (already redacted)
    - Domain errors propagate to the global handlers (api/error_handlers.py)

Design Decisions:
    - get_template_service exported for reuse by device_templates routes
    - device_type query takes precedence over scope when both are given
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from fleetconfig.core.domain_types import TemplateId
from fleetconfig.infrastructure.database import get_db
from fleetconfig.infrastructure.sql_assignment_store import SqlDeviceAssignmentStore
from fleetconfig.infrastructure.sql_template_store import SqlTemplateStore
from fleetconfig.schemas.config_template import (
    AffectedDevicesResponse,
    TemplateCreate,
    TemplateEnvelope,
    TemplateListResponse,
    TemplateResponse,
    TemplateUpdate,
    TemplateUpdateResponse,
)
from fleetconfig.services.config_template_service import ConfigTemplateService

router = APIRouter(prefix="/api/v1/config/templates", tags=["config-templates"])


async def get_template_service(
    db: AsyncSession = Depends(get_db),
) -> ConfigTemplateService:
    """Per-request service bound to the request's DB session."""
    return ConfigTemplateService(
        SqlTemplateStore(db), SqlDeviceAssignmentStore(db),
    )


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    scope: str | None = Query(None),
    device_type: str | None = Query(None, max_length=100),
    service: ConfigTemplateService = Depends(get_template_service),
):
    """List templates, optionally filtered by scope or device type."""
    if device_type:
        views = await service.list_templates_for_device_type(device_type)
    else:
        views = await service.list_templates(scope)
    return TemplateListResponse(
        templates=[TemplateResponse.model_validate(v) for v in views],
    )


@router.post(
    "", response_model=TemplateEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_template(
    body: TemplateCreate,
    service: ConfigTemplateService = Depends(get_template_service),
):
    view = await service.create_template(
        name=body.name,
        scope=body.scope,
        config=body.config,
        description=body.description,
        device_type=body.device_type,
    )
    return TemplateEnvelope(template=TemplateResponse.model_validate(view))


@router.get("/{template_id}", response_model=TemplateEnvelope)
async def get_template(
    template_id: int,
    service: ConfigTemplateService = Depends(get_template_service),
):
    view = await service.get_template(TemplateId(template_id))
    return TemplateEnvelope(template=TemplateResponse.model_validate(view))


@router.put("/{template_id}", response_model=TemplateUpdateResponse)
async def update_template(
    template_id: int,
    body: TemplateUpdate,
    service: ConfigTemplateService = Depends(get_template_service),
):
    """Partial update: omitted or blank fields are left unchanged."""
    view, affected = await service.update_template(
        TemplateId(template_id),
        name=body.name,
        description=body.description,
        config=body.config,
        clear_description=body.clear_description,
    )
    return TemplateUpdateResponse(
        template=TemplateResponse.model_validate(view),
        affected_devices=affected,
    )


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    service: ConfigTemplateService = Depends(get_template_service),
):
    """Delete an unassigned template; 409 with device_count if still assigned."""
    await service.delete_template(TemplateId(template_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{template_id}/affected-devices", response_model=AffectedDevicesResponse,
)
async def get_affected_devices(
    template_id: int,
    service: ConfigTemplateService = Depends(get_template_service),
):
    devices = await service.get_affected_devices(TemplateId(template_id))
    return AffectedDevicesResponse(
        template_id=template_id,
        device_ids=sorted(devices),
        count=len(devices),
    )
