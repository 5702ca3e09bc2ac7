"""
Audit log service orchestrator.

Records security-relevant actions in the ``logs`` table and serves the
activity listings. A failed database write never fails the caller: the
entry is parked in an in-process queue and flushed by ``retry_pending``.

Dependencies: user_portal.boundary.db.CRUD, sqlalchemy
System role: Audit trail use case orchestration
"""

import logging
import math
import threading
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.CRUD.audit_log_crud import AuditLogFilter, audit_log_crud
from user_portal.boundary.db.models.audit_log_model import AuditLogModel
from user_portal.observability.log_utils import log_with_context, redact

logger = logging.getLogger(__name__)

# Entries whose write failed; shared by every request in the process
_pending: list[dict[str, Any]] = []
_pending_lock = threading.Lock()


def pending_count() -> int:
    with _pending_lock:
        return len(_pending)


def describe_device(user_agent: str | None) -> str | None:
    """Reduce a User-Agent to a short device label."""
    if not user_agent:
        return None
    ua = user_agent.lower()
    if "android" in ua:
        return "Android"
    if "iphone" in ua or "ipad" in ua:
        return "iOS"
    if "windows" in ua:
        return "Windows"
    if "mac os" in ua or "macintosh" in ua:
        return "macOS"
    if "linux" in ua:
        return "Linux"
    return "Otro"


class AuditLogService:
    """Audit trail orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize audit log service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def log(
        self,
        action: str,
        username: str,
        success: bool,
        details: dict[str, Any] | None = None,
        ip: str | None = None,
        user_agent: str | None = None,
        device: str | None = None,
    ) -> bool:
        """
        Persist one audit entry.

        Returns:
            bool: True when written, False when queued for retry
        """
        entry = {
            "action": action,
            "username": username,
            "success": success,
            "details": details or {},
            "ip": ip,
            "user_agent": user_agent,
            "device": device or describe_device(user_agent),
        }
        try:
            await audit_log_crud.create(self.db, **entry)
            await self.db.commit()
            return True
        except SQLAlchemyError as e:
            await self.db.rollback()
            with _pending_lock:
                _pending.append(entry)
            log_with_context(
                logger,
                logging.WARNING,
                "Audit log write failed, queued for retry",
                action=action,
                username=username,
                error=str(e),
                **{f"detail_{key}": val for key, val in redact(details or {}).items()},
            )
            return False

    async def log_password_change(
        self,
        username: str,
        success: bool,
        details: dict[str, Any] | None = None,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        return await self.log("PASSWORD_CHANGE", username, success, details, ip, user_agent)

    async def log_authentication(
        self,
        username: str,
        success: bool,
        details: dict[str, Any] | None = None,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        return await self.log("LOGIN", username, success, details, ip, user_agent)

    async def retry_pending(self) -> dict[str, int]:
        """
        Write queued entries again.

        Returns:
            dict: retried (written now) and still_pending counts
        """
        with _pending_lock:
            batch = list(_pending)
            _pending.clear()

        written = 0
        failed: list[dict[str, Any]] = []
        for entry in batch:
            try:
                await audit_log_crud.create(self.db, **entry)
                await self.db.commit()
                written += 1
            except SQLAlchemyError as e:
                await self.db.rollback()
                failed.append(entry)
                logger.warning("Queued audit entry still failing", extra={"error": str(e)})

        with _pending_lock:
            _pending.extend(failed)
            still_pending = len(_pending)

        logger.info(
            "Retried pending audit entries",
            extra={"retried": written, "still_pending": still_pending},
        )
        return {"retried": written, "still_pending": still_pending}

    async def list_logs(
        self,
        page: int = 1,
        limit: int = 50,
        action: str | None = "LOGIN",
        username: str | None = None,
        exact_username: bool = False,
        success: bool | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Paginated audit listing, newest first.

        Returns:
            dict: logs, pagination {page, limit, total, total_pages} and
            the filters applied
        """
        page = max(page, 1)
        limit = max(min(limit, 500), 1)
        filters = AuditLogFilter(
            action=action,
            username=username,
            exact_username=exact_username,
            success=success,
            start=start,
            end=end,
        )
        try:
            rows = await audit_log_crud.list_filtered(
                self.db, filters, limit=limit, offset=(page - 1) * limit
            )
            total = await audit_log_crud.count_filtered(self.db, filters)
        except Exception as e:
            logger.error("Failed to list audit logs", extra={"error": str(e)})
            raise

        return {
            "logs": [self._to_dict(row) for row in rows],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if total else 0,
            },
            "filters": {
                "action": action,
                "username": username,
                "success": success,
                "start": start,
                "end": end,
            },
        }

    async def stats(self, username: str | None = None, action: str | None = None) -> dict[str, int]:
        """Totals for all entries, or for one user when *username* is given."""
        filters = AuditLogFilter(action=action, username=username, exact_username=True)
        breakdown = await audit_log_crud.success_breakdown(self.db, filters)
        successful = breakdown.get(True, 0)
        failed = breakdown.get(False, 0)
        return {
            "total": successful + failed,
            "successful": successful,
            "failed": failed,
            "pending": pending_count(),
        }

    @staticmethod
    def _to_dict(row: AuditLogModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "action": row.action,
            "username": row.username,
            "success": row.success,
            "details": row.details,
            "ip": row.ip,
            "user_agent": row.user_agent,
            "device": row.device,
            "created_at": row.created_at,
        }
