"""Device Template Routes — assignment bookkeeping for a single device.

Invariants:
    - Every endpoint returns the device's full, ordered, redacted template list
    - Unknown template ids → 404; unknown devices are simply devices with no templates
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from fleetconfig.api.routes.config_templates import get_template_service
from fleetconfig.core.domain_types import DeviceId, TemplateId
from fleetconfig.core.template_view import TemplateView
from fleetconfig.schemas.config_template import (
    DeviceTemplatesResponse,
    DeviceTemplatesUpdate,
    TemplateResponse,
)
from fleetconfig.services.config_template_service import ConfigTemplateService

router = APIRouter(
    prefix="/api/v1/devices/{device_id}/templates", tags=["device-templates"],
)

DevicePath = Annotated[str, Path(min_length=1, max_length=64)]


def _respond(device_id: str, views: list[TemplateView]) -> DeviceTemplatesResponse:
    return DeviceTemplatesResponse(
        device_id=device_id,
        templates=[TemplateResponse.model_validate(v) for v in views],
    )


@router.get("", response_model=DeviceTemplatesResponse)
async def get_device_templates(
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    views = await service.get_device_templates(DeviceId(device_id))
    return _respond(device_id, views)


@router.put("", response_model=DeviceTemplatesResponse)
async def set_device_templates(
    body: DeviceTemplatesUpdate,
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    """Replace the device's ordered template list."""
    views = await service.set_device_templates(
        DeviceId(device_id), [TemplateId(tid) for tid in body.template_ids],
    )
    return _respond(device_id, views)


@router.post("/{template_id}", response_model=DeviceTemplatesResponse)
async def add_template_to_device(
    template_id: int,
    device_id: DevicePath,
    position: int | None = Query(None),
    service: ConfigTemplateService = Depends(get_template_service),
):
    views = await service.add_template_to_device(
        DeviceId(device_id), TemplateId(template_id), position,
    )
    return _respond(device_id, views)


@router.delete("/{template_id}", response_model=DeviceTemplatesResponse)
async def remove_template_from_device(
    template_id: int,
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    views = await service.remove_template_from_device(
        DeviceId(device_id), TemplateId(template_id),
    )
    return _respond(device_id, views)
