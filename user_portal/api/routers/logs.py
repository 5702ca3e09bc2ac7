"""
Audit log API endpoints.

Routes:
- GET /logs/logins - Paginated login history with filters
- GET /logs/mine - Caller's own history
- GET /logs/stats - Success and failure totals
- GET /logs/mine/stats - Caller's totals
- POST /logs/retry-pending - Flush entries queued while the database was down

Dependencies: user_portal.application.services.audit_log_service
System role: Audit trail HTTP API
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query

from user_portal.api.deps.dependencies import get_audit_log_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.audit_log_service import AuditLogService
from user_portal.core.security import TokenUser, get_current_user

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/logins")
@handle_portal_errors("audit log listing")
async def list_logins(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    action: str | None = Query("LOGIN"),
    username: str | None = Query(None, description="Case-insensitive partial match"),
    success: bool | None = Query(None),
    start: datetime | None = Query(None, alias="startDate"),
    end: datetime | None = Query(None, alias="endDate"),
    audit_service: AuditLogService = Depends(get_audit_log_service),
) -> dict[str, Any]:
    return await audit_service.list_logs(
        page=page,
        limit=limit,
        action=action,
        username=username,
        success=success,
        start=start,
        end=end,
    )


@router.get("/mine")
@handle_portal_errors("own audit log listing")
async def list_my_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    action: str | None = Query(None),
    current_user: TokenUser = Depends(get_current_user),
    audit_service: AuditLogService = Depends(get_audit_log_service),
) -> dict[str, Any]:
    return await audit_service.list_logs(
        page=page,
        limit=limit,
        action=action,
        username=current_user.sAMAccountName,
        exact_username=True,
    )


@router.get("/stats")
@handle_portal_errors("audit stats")
async def stats(
    action: str | None = Query(None),
    audit_service: AuditLogService = Depends(get_audit_log_service),
) -> dict[str, int]:
    return await audit_service.stats(action=action)


@router.get("/mine/stats")
@handle_portal_errors("own audit stats")
async def my_stats(
    current_user: TokenUser = Depends(get_current_user),
    audit_service: AuditLogService = Depends(get_audit_log_service),
) -> dict[str, int]:
    return await audit_service.stats(username=current_user.sAMAccountName)


@router.post("/retry-pending")
@handle_portal_errors("pending audit retry")
async def retry_pending(
    audit_service: AuditLogService = Depends(get_audit_log_service),
) -> dict[str, int]:
    return await audit_service.retry_pending()
