"""Device Config Routes — a device's resolved configuration and its overrides.

Invariants:
    - Every body is a DeviceConfigView: redacted, with has_*_password indicators
    - Desired config is computed per request; template edits show up immediately
    - Unknown devices resolve to an empty configuration, never 404
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from fleetconfig.api.routes.config_templates import get_template_service
from fleetconfig.core.domain_types import DeviceId
from fleetconfig.schemas.config_template import (
    DeviceConfigResponse,
    DeviceOverridesUpdate,
)
from fleetconfig.services.config_template_service import ConfigTemplateService

router = APIRouter(
    prefix="/api/v1/devices/{device_id}/config", tags=["device-config"],
)

DevicePath = Annotated[str, Path(min_length=1, max_length=64)]


@router.get("/desired", response_model=DeviceConfigResponse)
async def get_desired_config(
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    """Templates merged in assignment order, then overrides; later layers win."""
    view = await service.get_desired_config(DeviceId(device_id))
    return DeviceConfigResponse.model_validate(view)


@router.get("/overrides", response_model=DeviceConfigResponse)
async def get_device_overrides(
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    view = await service.get_device_overrides(DeviceId(device_id))
    return DeviceConfigResponse.model_validate(view)


@router.put("/overrides", response_model=DeviceConfigResponse)
async def set_device_overrides(
    body: DeviceOverridesUpdate,
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    view = await service.set_device_overrides(DeviceId(device_id), body.config)
    return DeviceConfigResponse.model_validate(view)


@router.patch("/overrides", response_model=DeviceConfigResponse)
async def patch_device_overrides(
    body: DeviceOverridesUpdate,
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    """Overlay onto the current overrides; secrets not resent are kept."""
    view = await service.patch_device_overrides(DeviceId(device_id), body.config)
    return DeviceConfigResponse.model_validate(view)


@router.delete("/overrides", status_code=status.HTTP_204_NO_CONTENT)
async def clear_device_overrides(
    device_id: DevicePath,
    service: ConfigTemplateService = Depends(get_template_service),
):
    await service.clear_device_overrides(DeviceId(device_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
