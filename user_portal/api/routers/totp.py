"""
TOTP recovery API endpoints.

Routes:
- POST /totp/check-user - Find the account and report whether 2FA is set
- POST /totp/verify-totp - Check an authenticator code
- POST /totp/get-totp-info - Whether a usable secret is stored
- POST /totp/reset-password - Set a new password after an authenticator check

Dependencies: user_portal.application.services.totp_verification_service
System role: Authenticator recovery HTTP API
"""

from typing import Any

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import get_totp_verification_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.totp_verification_service import TOTPVerificationService
from user_portal.models.security import IdentifierRequest, TOTPResetPasswordRequest, VerifyTOTPRequest

router = APIRouter(prefix="/totp", tags=["totp"])


@router.post("/check-user")
@handle_portal_errors("TOTP user check")
async def check_user(
    body: IdentifierRequest,
    totp_service: TOTPVerificationService = Depends(get_totp_verification_service),
) -> dict[str, Any]:
    return await totp_service.check_user(body.identifier)


@router.post("/verify-totp")
@handle_portal_errors("TOTP verification")
async def verify_totp(
    body: VerifyTOTPRequest,
    totp_service: TOTPVerificationService = Depends(get_totp_verification_service),
) -> dict[str, Any]:
    """
    Verify a six digit code.

    Raises:
        HTTPException(400): Code format
        HTTPException(401): Wrong code
        HTTPException(404): Unknown account or no secret
    """
    return await totp_service.verify(body.identifier, body.code)


@router.post("/get-totp-info")
@handle_portal_errors("TOTP info")
async def get_totp_info(
    body: IdentifierRequest,
    totp_service: TOTPVerificationService = Depends(get_totp_verification_service),
) -> dict[str, Any]:
    return await totp_service.get_totp_info(body.identifier)


@router.post("/reset-password")
@handle_portal_errors("TOTP password reset")
async def reset_password(
    body: TOTPResetPasswordRequest,
    totp_service: TOTPVerificationService = Depends(get_totp_verification_service),
) -> dict[str, Any]:
    """
    Raises:
        HTTPException(400): Code format or password policy
        HTTPException(401): Wrong code
    """
    return await totp_service.reset_password(body.identifier, body.code, body.newPassword)
