"""
Authentication API endpoints.

Routes:
- POST /auth/login - Directory login, returns the JWT pair
- POST /auth/refresh - New access token from a refresh token
- GET /auth/me - Profile of the token holder
- GET /auth/employee-check - Whether the token holder is an employee

Dependencies: user_portal.application.services.auth_service
System role: Authentication HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from user_portal.api.deps.dependencies import get_auth_service
from user_portal.api.routers.router_utils import client_ip, handle_portal_errors, user_agent
from user_portal.application.services.auth_service import AuthService
from user_portal.core.security import TokenUser, get_current_user
from user_portal.models.auth import (
    AccessTokenResponse,
    LoginRequest,
    LoginResponse,
    LoginUser,
    RefreshRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
@handle_portal_errors("login")
async def login(
    body: LoginRequest,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Authenticate with directory credentials.

    Raises:
        HTTPException(401): Invalid credentials
        HTTPException(502/503): Directory unavailable
    """
    result = await auth_service.login(
        body.username,
        body.password,
        ip=client_ip(request),
        user_agent=user_agent(request),
    )
    return LoginResponse(**result)


@router.post("/refresh", response_model=AccessTokenResponse)
@handle_portal_errors("token refresh")
async def refresh(
    body: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AccessTokenResponse:
    return AccessTokenResponse(**auth_service.refresh(body.refreshToken))


@router.get("/me", response_model=LoginUser)
@handle_portal_errors("profile lookup")
async def me(
    current_user: TokenUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginUser:
    return LoginUser(**await auth_service.get_user_data(current_user.sAMAccountName))


@router.get("/employee-check")
@handle_portal_errors("employee check")
async def employee_check(
    current_user: TokenUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    return await auth_service.employee_check(current_user.sAMAccountName)
