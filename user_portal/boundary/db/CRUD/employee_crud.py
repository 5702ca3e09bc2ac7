"""
Employee CRUD operations.

Lookups over the HR tables by identity card, name, cost center, city and
termination status.

Dependencies: sqlalchemy, user_portal.boundary.db.models
System role: Employee records persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.CRUD.base_crud import BaseCRUD
from user_portal.boundary.db.models.employee_model import DepartmentModel, EmployeeModel


class EmployeeCRUD(BaseCRUD[EmployeeModel]):
    """
    CRUD operations for EmployeeModel.

    Extends BaseCRUD with the HR lookups the identity and account flows use.
    """

    def __init__(self) -> None:
        super().__init__(EmployeeModel)

    async def get_by_ci(
        self,
        session: AsyncSession,
        ci: str,
        active_only: bool = False,
    ) -> EmployeeModel | None:
        """
        Retrieve an employee by identity card number.

        Args:
            session: Async database session
            ci: Identity card number
            active_only: Skip terminated employees

        Returns:
            EmployeeModel if found, None otherwise
        """
        stmt = select(EmployeeModel).where(EmployeeModel.ci == ci)
        if active_only:
            stmt = stmt.where(EmployeeModel.is_terminated.is_(False))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def search_by_name(
        self,
        session: AsyncSession,
        first_name: str,
        last_name_1: str,
        last_name_2: str,
    ) -> Sequence[EmployeeModel]:
        """Case-insensitive substring match on all three name parts."""
        stmt = select(EmployeeModel).where(
            EmployeeModel.first_name.ilike(f"%{first_name}%"),
            EmployeeModel.last_name_1.ilike(f"%{last_name_1}%"),
            EmployeeModel.last_name_2.ilike(f"%{last_name_2}%"),
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_cost_center(self, session: AsyncSession, cost_center_id: str) -> Sequence[EmployeeModel]:
        stmt = select(EmployeeModel).where(EmployeeModel.cost_center_id == cost_center_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_terminated(self, session: AsyncSession) -> Sequence[EmployeeModel]:
        stmt = select(EmployeeModel).where(EmployeeModel.is_terminated.is_(True))
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_city(self, session: AsyncSession, city: str) -> Sequence[EmployeeModel]:
        stmt = select(EmployeeModel).where(EmployeeModel.city.ilike(city))
        result = await session.execute(stmt)
        return result.scalars().all()


class DepartmentCRUD(BaseCRUD[DepartmentModel]):
    """CRUD operations for DepartmentModel."""

    def __init__(self) -> None:
        super().__init__(DepartmentModel)

    async def get_description(self, session: AsyncSession, direction_id: str | None) -> str | None:
        if not direction_id:
            return None
        stmt = select(DepartmentModel.description).where(DepartmentModel.direction_id == direction_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


employee_crud = EmployeeCRUD()
department_crud = DepartmentCRUD()
