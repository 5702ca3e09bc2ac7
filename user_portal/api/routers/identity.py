"""
Identity API endpoints.

Routes:
- POST /identity/verify - Student or employee for a CI
- POST /identity/dual-status - Employee and student at once

Dependencies: user_portal.application.services.identity_service
System role: Identity verification HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import get_identity_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.identity_service import IdentityService
from user_portal.models.account import VerifyIdentityRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/identity", tags=["identity"])


@router.post("/verify")
@handle_portal_errors("identity verification")
async def verify_identity(
    body: VerifyIdentityRequest,
    identity_service: IdentityService = Depends(get_identity_service),
) -> dict[str, Any]:
    logger.info("Identity verification requested", extra={"ci": body.ci})
    result = await identity_service.verify_ci(body.ci)
    return {"success": True, **result}


@router.post("/dual-status")
@handle_portal_errors("dual status check")
async def dual_status(
    body: VerifyIdentityRequest,
    identity_service: IdentityService = Depends(get_identity_service),
) -> dict[str, Any]:
    return await identity_service.dual_status(body.ci)
