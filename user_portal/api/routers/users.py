"""
Directory user API endpoints.

Routes:
- GET /users - Paginated active users
- GET /users/search?term= - Name, username or email search
- DELETE /users/cache - Drop cached user data
- GET /users/cache/stats - Cache counters
- GET /users/{sAMAccountName} - Single user

Dependencies: user_portal.application.services.user_directory_service
All routes require a bearer token.

System role: User directory HTTP API
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from user_portal.api.deps.dependencies import get_user_directory_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.user_directory_service import (
    MAX_PAGE_SIZE,
    UserDirectoryService,
)
from user_portal.core.security import TokenUser, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
@handle_portal_errors("user listing")
async def list_users(
    page: int = Query(1, ge=1),
    pageSize: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user_service: UserDirectoryService = Depends(get_user_directory_service),
    current_user: TokenUser = Depends(get_current_user),
) -> dict[str, Any]:
    return await user_service.list_users(page, pageSize)


@router.get("/search")
@handle_portal_errors("user search")
async def search_users(
    term: str = Query(..., description="At least two characters"),
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    user_service: UserDirectoryService = Depends(get_user_directory_service),
    current_user: TokenUser = Depends(get_current_user),
) -> dict[str, Any]:
    return await user_service.search(term, limit)


# Registered before /{sAMAccountName} so "cache" is not read as a username
@router.delete("/cache")
@handle_portal_errors("user cache clear")
async def clear_cache(
    user_service: UserDirectoryService = Depends(get_user_directory_service),
    current_user: TokenUser = Depends(get_current_user),
) -> dict[str, Any]:
    return user_service.clear_cache()


@router.get("/cache/stats")
@handle_portal_errors("user cache stats")
async def cache_stats(
    user_service: UserDirectoryService = Depends(get_user_directory_service),
    current_user: TokenUser = Depends(get_current_user),
) -> dict[str, Any]:
    return user_service.cache_stats()


@router.get("/{sAMAccountName}")
@handle_portal_errors("user lookup")
async def get_user(
    sAMAccountName: str,
    user_service: UserDirectoryService = Depends(get_user_directory_service),
    current_user: TokenUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Raises:
        HTTPException(404): No active account with that name
    """
    return await user_service.get_user(sAMAccountName)
