"""
Device API endpoints.

All routes act on the caller's own devices.

Routes:
- POST /devices - Register a device
- GET /devices - List devices
- GET /devices/stats - Count by type
- GET /devices/mac/{mac}/manufacturer - Vendor lookup
- GET /devices/{device_id} - Single device
- PUT /devices/{device_id} - Update name, type or MAC
- DELETE /devices/{device_id} - Remove a device

Dependencies: user_portal.application.services.device_service
System role: Device registry HTTP API
"""

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, status

from user_portal.api.deps.dependencies import get_device_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.device_service import DeviceService
from user_portal.core.security import TokenUser, get_current_user
from user_portal.models.common import MessageResponse
from user_portal.models.device import (
    CreateDeviceRequest,
    DeviceResponse,
    DeviceStatsResponse,
    UpdateDeviceRequest,
)

from .devices_responses import build_device_list_response, build_device_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devices", tags=["devices"])


@router.post("", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED)
@handle_portal_errors("device registration")
async def create_device(
    body: CreateDeviceRequest,
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> DeviceResponse:
    """
    Raises:
        HTTPException(400): Bad MAC or device type
        HTTPException(409): MAC already registered
    """
    device = await device_service.create(current_user.sAMAccountName, body.mac, body.type, body.name)
    return build_device_response(device)


@router.get("")
@handle_portal_errors("device listing")
async def list_devices(
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> dict[str, Any]:
    return build_device_list_response(await device_service.list_devices(current_user.sAMAccountName))


@router.get("/stats", response_model=DeviceStatsResponse)
@handle_portal_errors("device stats")
async def device_stats(
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> DeviceStatsResponse:
    return DeviceStatsResponse(**await device_service.stats(current_user.sAMAccountName))


@router.get("/mac/{mac}/manufacturer")
@handle_portal_errors("manufacturer lookup")
async def manufacturer(
    mac: str,
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> dict[str, str]:
    return await device_service.manufacturer(mac)


@router.get("/{device_id}", response_model=DeviceResponse)
@handle_portal_errors("device lookup")
async def get_device(
    device_id: uuid.UUID,
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> DeviceResponse:
    return build_device_response(await device_service.get(current_user.sAMAccountName, device_id))


@router.put("/{device_id}", response_model=DeviceResponse)
@handle_portal_errors("device update")
async def update_device(
    device_id: uuid.UUID,
    body: UpdateDeviceRequest,
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> DeviceResponse:
    device = await device_service.update(
        current_user.sAMAccountName,
        device_id,
        name=body.name,
        device_type=body.type,
        mac=body.mac,
    )
    return build_device_response(device)


@router.delete("/{device_id}", response_model=MessageResponse)
@handle_portal_errors("device deletion")
async def delete_device(
    device_id: uuid.UUID,
    current_user: TokenUser = Depends(get_current_user),
    device_service: DeviceService = Depends(get_device_service),
) -> MessageResponse:
    logger.info("Device deletion requested", extra={"device_id": str(device_id)})
    return MessageResponse(**await device_service.delete(current_user.sAMAccountName, device_id))
