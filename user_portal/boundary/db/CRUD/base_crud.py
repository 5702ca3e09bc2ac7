"""
Base CRUD operations for SQLAlchemy models.

Generic helpers shared by the audit log, employee and device CRUD
classes. Methods flush but never commit; the calling service owns the
transaction.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic CRUD over one mapped model.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Insert a row and return it with defaults (id, timestamps) populated.

        Args:
            session: Async database session
            **kwargs: Model field values
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def apply_changes(self, session: AsyncSession, instance: ModelT, changes: dict[str, Any]) -> ModelT:
        """
        Set the given attributes on a loaded row and flush them.

        Unique constraint violations surface here as IntegrityError.
        """
        for field, value in changes.items():
            setattr(instance, field, value)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Delete by primary key; False when no row matched."""
        stmt = delete(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def count(self, session: AsyncSession, *criteria) -> int:
        """Count rows matching optional WHERE criteria."""
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await session.execute(stmt)
        return int(result.scalar_one())
