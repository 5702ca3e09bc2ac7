"""
Password API endpoints.

Routes: POST /password/change

Dependencies: user_portal.application.services.password_service
System role: Self-service password HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import get_password_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.password_service import PasswordService
from user_portal.core.security import TokenUser, get_current_user
from user_portal.models.common import MessageResponse
from user_portal.models.security import ChangePasswordRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/password", tags=["password"])


@router.post("/change", response_model=MessageResponse)
@handle_portal_errors("password change")
async def change_password(
    body: ChangePasswordRequest,
    current_user: TokenUser = Depends(get_current_user),
    password_service: PasswordService = Depends(get_password_service),
) -> MessageResponse:
    """
    Change the caller's password.

    Raises:
        HTTPException(400): Policy violation
        HTTPException(401): Current password is wrong
        HTTPException(403): Directory refused the change
    """
    logger.info("Password change requested", extra={"username": current_user.sAMAccountName})
    result = await password_service.change_own_password(
        current_user.sAMAccountName, body.currentPassword, body.newPassword
    )
    return MessageResponse(**result)
