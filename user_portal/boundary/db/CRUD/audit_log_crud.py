"""
Audit log CRUD operations.

Filtered, paginated listing and aggregate counts over the ``logs`` table.

Dependencies: sqlalchemy, user_portal.boundary.db.models
System role: Audit trail persistence operations
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.CRUD.base_crud import BaseCRUD
from user_portal.boundary.db.models.audit_log_model import AuditLogModel


@dataclass
class AuditLogFilter:
    """Optional criteria for audit log queries; None means no constraint."""

    action: str | None = None
    username: str | None = None
    exact_username: bool = False
    success: bool | None = None
    start: datetime | None = None
    end: datetime | None = None

    def criteria(self) -> list:
        clauses = []
        if self.action:
            clauses.append(AuditLogModel.action == self.action)
        if self.username:
            if self.exact_username:
                clauses.append(AuditLogModel.username == self.username)
            else:
                clauses.append(AuditLogModel.username.ilike(f"%{self.username}%"))
        if self.success is not None:
            clauses.append(AuditLogModel.success == self.success)
        if self.start:
            clauses.append(AuditLogModel.created_at >= self.start)
        if self.end:
            clauses.append(AuditLogModel.created_at <= self.end)
        return clauses


class AuditLogCRUD(BaseCRUD[AuditLogModel]):
    """CRUD operations for AuditLogModel."""

    def __init__(self) -> None:
        super().__init__(AuditLogModel)

    async def list_filtered(
        self,
        session: AsyncSession,
        filters: AuditLogFilter,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[AuditLogModel]:
        """
        Retrieve log rows newest first.

        Args:
            session: Async database session
            filters: Query criteria
            limit: Page size
            offset: Rows to skip

        Returns:
            Sequence of AuditLogModel rows
        """
        stmt = (
            select(AuditLogModel)
            .where(*filters.criteria())
            .order_by(AuditLogModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_filtered(self, session: AsyncSession, filters: AuditLogFilter) -> int:
        return await self.count(session, *filters.criteria())

    async def success_breakdown(
        self, session: AsyncSession, filters: AuditLogFilter
    ) -> dict[bool, int]:
        """Row counts grouped by the success flag."""
        stmt = (
            select(AuditLogModel.success, func.count())
            .where(*filters.criteria())
            .group_by(AuditLogModel.success)
        )
        result = await session.execute(stmt)
        return {bool(success): int(total) for success, total in result.all()}


audit_log_crud = AuditLogCRUD()
