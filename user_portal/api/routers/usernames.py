"""
Username API endpoints.

Routes:
- GET /usernames/{user_type}/{ci}/options - Free username suggestions
- POST /usernames/check - Availability of one username

Dependencies: user_portal.application.services.username_service
System role: Username suggestion HTTP API
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from user_portal.api.deps.dependencies import get_username_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.username_service import UsernameService, UserType
from user_portal.models.account import CheckUsernameRequest

router = APIRouter(prefix="/usernames", tags=["usernames"])


@router.get("/{user_type}/{ci}/options")
@handle_portal_errors("username suggestion")
async def username_options(
    user_type: UserType,
    ci: str,
    count: int = Query(3, ge=1, le=10),
    reset: bool = Query(False, description="Forget options offered earlier"),
    username_service: UsernameService = Depends(get_username_service),
) -> dict[str, Any]:
    """
    Suggest usernames not offered before for this CI.

    Raises:
        HTTPException(400): Bad CI or missing name data
        HTTPException(404): No student or employee for the CI
    """
    return await username_service.generate_options(user_type, ci, count=count, reset=reset)


@router.post("/check")
@handle_portal_errors("username check")
async def check_username(
    body: CheckUsernameRequest,
    username_service: UsernameService = Depends(get_username_service),
) -> dict[str, Any]:
    return await username_service.check_available(body.username)
