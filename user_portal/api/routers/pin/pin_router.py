"""
PIN API endpoints.

Routes (token):
- POST /pin/save - Store an encrypted recovery PIN
- DELETE /pin/remove - Clear the PIN
- GET /pin/check - Whether the caller has a PIN

Routes (public, recovery flow):
- POST /pin/find-user
- POST /pin/check-user-has-pin
- POST /pin/verify-for-recovery
- POST /pin/reset-password

Dependencies: user_portal.application.services.pin_service
System role: Recovery PIN HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import get_pin_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.directory_lookup import summarize_user
from user_portal.application.services.pin_service import PinService
from user_portal.core.security import TokenUser, get_current_user
from user_portal.models.common import MessageResponse
from user_portal.models.security import (
    IdentifierRequest,
    PinResetPasswordRequest,
    SavePinRequest,
    VerifyPinRequest,
)

from .pin_validators import validate_pin_shape

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pin", tags=["pin"])


@router.post("/save", response_model=MessageResponse)
@handle_portal_errors("PIN save")
async def save_pin(
    body: SavePinRequest,
    current_user: TokenUser = Depends(get_current_user),
    pin_service: PinService = Depends(get_pin_service),
) -> MessageResponse:
    """
    Raises:
        HTTPException(400): PIN rejected by policy
        HTTPException(404): Account not found
    """
    return MessageResponse(**await pin_service.save(current_user.sAMAccountName, body.pin))


@router.delete("/remove", response_model=MessageResponse)
@handle_portal_errors("PIN removal")
async def remove_pin(
    current_user: TokenUser = Depends(get_current_user),
    pin_service: PinService = Depends(get_pin_service),
) -> MessageResponse:
    return MessageResponse(**await pin_service.remove(current_user.sAMAccountName))


@router.get("/check")
@handle_portal_errors("PIN check")
async def check_pin(
    current_user: TokenUser = Depends(get_current_user),
    pin_service: PinService = Depends(get_pin_service),
) -> dict[str, Any]:
    has_pin = await pin_service.has_pin(current_user.sAMAccountName)
    return {"hasPin": has_pin, "sAMAccountName": current_user.sAMAccountName}


@router.post("/find-user")
@handle_portal_errors("PIN user lookup")
async def find_user(
    body: IdentifierRequest,
    pin_service: PinService = Depends(get_pin_service),
) -> dict[str, Any]:
    entry = await pin_service.find_user(body.identifier)
    return {"success": True, "user": summarize_user(entry)}


@router.post("/check-user-has-pin")
@handle_portal_errors("PIN lookup")
async def check_user_has_pin(
    body: IdentifierRequest,
    pin_service: PinService = Depends(get_pin_service),
) -> dict[str, Any]:
    return await pin_service.check_user_has_pin(body.identifier)


@router.post("/verify-for-recovery")
@handle_portal_errors("PIN verification")
async def verify_for_recovery(
    body: VerifyPinRequest,
    pin_service: PinService = Depends(get_pin_service),
) -> dict[str, Any]:
    """
    Check a PIN before letting the user pick a new password.

    Raises:
        HTTPException(401): Wrong PIN
        HTTPException(404): Unknown account or no PIN
    """
    pin = validate_pin_shape(body.pin)
    result = await pin_service.verify_for_recovery(body.identifier, pin)
    return {"success": True, **result}


@router.post("/reset-password", response_model=MessageResponse)
@handle_portal_errors("PIN password reset")
async def reset_password(
    body: PinResetPasswordRequest,
    pin_service: PinService = Depends(get_pin_service),
) -> MessageResponse:
    pin = validate_pin_shape(body.pin)
    logger.info("PIN password reset requested", extra={"identifier": body.identifier})
    result = await pin_service.reset_password_with_pin(body.identifier, pin, body.newPassword)
    return MessageResponse(**result)
