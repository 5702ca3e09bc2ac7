"""
Email recovery and notification API endpoints.

Routes:
- POST /email/forgot-password - Mail a reset code to the recovery address
- POST /email/reset-password - Reset with the mailed code
- POST /email/verification - Mail a code to confirm a backup address
- POST /email/verify-code - Check a mailed code
- GET /email/check-user/{identifier} - Whether a recovery address exists
- GET /email/stats - Daily sending quota
- GET /email/expiry/report - Users close to password expiry
- POST /email/expiry/send-alerts - Mail expiry warnings

Dependencies: user_portal.application.services.email_recovery_service,
    user_portal.application.services.password_expiry_service
System role: Email recovery HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import (
    get_email_recovery_service,
    get_password_expiry_service,
)
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.email_recovery_service import EmailRecoveryService
from user_portal.application.services.password_expiry_service import (
    DEFAULT_THRESHOLDS,
    PasswordExpiryService,
)
from user_portal.models.common import MessageResponse
from user_portal.models.email import (
    EmailResetPasswordRequest,
    ForgotPasswordRequest,
    SendAlertsRequest,
    SendVerificationRequest,
    VerifyCodeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email", tags=["email"])


@router.post("/forgot-password")
@handle_portal_errors("password recovery email")
async def forgot_password(
    body: ForgotPasswordRequest,
    recovery_service: EmailRecoveryService = Depends(get_email_recovery_service),
) -> dict[str, Any]:
    """
    Raises:
        HTTPException(400): No identifier or no recovery address
        HTTPException(404): Unknown account
        HTTPException(503): Daily mail quota reached
    """
    return await recovery_service.forgot_password(body.identifier or "")


@router.post("/reset-password", response_model=MessageResponse)
@handle_portal_errors("email password reset")
async def reset_password(
    body: EmailResetPasswordRequest,
    recovery_service: EmailRecoveryService = Depends(get_email_recovery_service),
) -> MessageResponse:
    logger.info("Email password reset requested")
    result = await recovery_service.reset_password(body.email, body.code, body.newPassword)
    return MessageResponse(**result)


@router.post("/verification")
@handle_portal_errors("verification email")
async def send_verification(
    body: SendVerificationRequest,
    recovery_service: EmailRecoveryService = Depends(get_email_recovery_service),
) -> dict[str, Any]:
    return await recovery_service.send_verification(body.email, body.userName)


@router.post("/verify-code")
@handle_portal_errors("code verification")
async def verify_code(
    body: VerifyCodeRequest,
    recovery_service: EmailRecoveryService = Depends(get_email_recovery_service),
) -> dict[str, Any]:
    return recovery_service.verify_code(body.email, body.code)


@router.get("/check-user/{identifier}")
@handle_portal_errors("recovery address check")
async def check_user(
    identifier: str,
    recovery_service: EmailRecoveryService = Depends(get_email_recovery_service),
) -> dict[str, Any]:
    return await recovery_service.check_user(identifier)


@router.get("/stats")
@handle_portal_errors("email stats")
async def email_stats(
    recovery_service: EmailRecoveryService = Depends(get_email_recovery_service),
) -> dict[str, Any]:
    return recovery_service.stats()


@router.get("/expiry/report")
@handle_portal_errors("password expiry report")
async def expiry_report(
    expiry_service: PasswordExpiryService = Depends(get_password_expiry_service),
) -> dict[str, Any]:
    return await expiry_service.report()


@router.post("/expiry/send-alerts")
@handle_portal_errors("password expiry alerts")
async def send_expiry_alerts(
    body: SendAlertsRequest,
    expiry_service: PasswordExpiryService = Depends(get_password_expiry_service),
) -> dict[str, Any]:
    thresholds = tuple(body.thresholds) if body.thresholds else DEFAULT_THRESHOLDS
    logger.info("Sending password expiry alerts", extra={"thresholds": list(thresholds)})
    return await expiry_service.send_alerts(thresholds)
