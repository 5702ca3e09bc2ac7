"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/ldap

Dependencies: user_portal.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from user_portal.api.deps.dependencies import get_directory
from user_portal.boundary.db import ping_database
from user_portal.boundary.ldap import DirectoryClient
from user_portal.core.exceptions import DirectoryError
from user_portal.models.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db() -> HealthResponse:
    """Database health check."""
    try:
        await ping_database()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database health check failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        )
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/ldap", response_model=HealthResponse)
async def health_check_ldap(directory: DirectoryClient = Depends(get_directory)) -> HealthResponse:
    """Directory health check."""
    try:
        await directory.ping()
    except DirectoryError as e:
        logger.error("LDAP health check failed", extra={"error": e.message})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="LDAP connection failed",
        )
    return HealthResponse(status="healthy", message="LDAP connection OK")
