"""
Two-factor API endpoints.

Routes:
- POST /2fa/activate - Store a TOTP secret and enable 2FA
- GET /2fa/status/{sAMAccountName} - Current 2FA state
- POST /2fa/deactivate - Disable 2FA for the caller
- GET /2fa/generate-secret - New secret, backup codes and otpauth URL

Dependencies: user_portal.application.services.two_factor_service
System role: 2FA management HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import get_two_factor_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.two_factor_service import TwoFactorService
from user_portal.core.security import TokenUser, get_current_user
from user_portal.models.security import (
    ActivateTwoFactorRequest,
    GeneratedSecretResponse,
    TwoFactorStatusResponse,
)

from .two_factor_validators import validate_activation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/2fa", tags=["2fa"])


@router.post("/activate")
@handle_portal_errors("2FA activation")
async def activate(
    request: ActivateTwoFactorRequest,
    current_user: TokenUser = Depends(get_current_user),
    two_factor_service: TwoFactorService = Depends(get_two_factor_service),
) -> dict[str, Any]:
    """
    Enable 2FA with a secret the user already scanned.

    Raises:
        HTTPException(400): Missing fields or invalid secret
        HTTPException(404): Unknown account
    """
    sam, secret = validate_activation(request, current_user)
    logger.info("Activating 2FA", extra={"username": sam})
    return await two_factor_service.activate(sam, secret)


@router.get("/status/{sAMAccountName}", response_model=TwoFactorStatusResponse)
@handle_portal_errors("2FA status")
async def get_status(
    sAMAccountName: str,
    two_factor_service: TwoFactorService = Depends(get_two_factor_service),
) -> TwoFactorStatusResponse:
    return TwoFactorStatusResponse(**await two_factor_service.status(sAMAccountName))


@router.post("/deactivate")
@handle_portal_errors("2FA deactivation")
async def deactivate(
    current_user: TokenUser = Depends(get_current_user),
    two_factor_service: TwoFactorService = Depends(get_two_factor_service),
) -> dict[str, Any]:
    logger.info("Deactivating 2FA", extra={"username": current_user.sAMAccountName})
    return await two_factor_service.deactivate(current_user.sAMAccountName)


@router.get("/generate-secret", response_model=GeneratedSecretResponse)
@handle_portal_errors("2FA secret generation")
async def generate_secret(
    current_user: TokenUser = Depends(get_current_user),
    two_factor_service: TwoFactorService = Depends(get_two_factor_service),
) -> GeneratedSecretResponse:
    return GeneratedSecretResponse(**two_factor_service.generate_secret(current_user.sAMAccountName))
