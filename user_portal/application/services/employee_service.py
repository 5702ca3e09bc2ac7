"""
Employee service orchestrator.

HR lookups over the employees table.

Dependencies: user_portal.boundary.db.CRUD
System role: Employee record use cases
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.CRUD import department_crud, employee_crud
from user_portal.boundary.db.models import EmployeeModel
from user_portal.core.exceptions import NotFoundError, ValidationError
from user_portal.core.text import sanitize_ci

logger = logging.getLogger(__name__)

NO_DEPARTMENT = "Sin departamento"


def map_employee(employee: EmployeeModel, department: str | None = None) -> dict[str, Any]:
    return {
        "ci": employee.ci,
        "firstName": employee.first_name,
        "lastName1": employee.last_name_1,
        "lastName2": employee.last_name_2,
        "fullName": employee.full_name,
        "costCenterId": employee.cost_center_id,
        "directionId": employee.direction_id,
        "department": department or NO_DEPARTMENT,
        "city": employee.city,
        "isTerminated": employee.is_terminated,
    }


class EmployeeService:
    """Employee lookups."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _with_department(self, employee: EmployeeModel) -> dict[str, Any]:
        department = await department_crud.get_description(self.db, employee.direction_id)
        return map_employee(employee, department)

    async def find_active(self, ci: str) -> dict[str, Any] | None:
        """Non-terminated employee with department, or None."""
        employee = await employee_crud.get_by_ci(self.db, sanitize_ci(ci), active_only=True)
        if employee is None:
            return None
        return await self._with_department(employee)

    async def get_by_ci(self, ci: str) -> dict[str, Any]:
        ci = sanitize_ci(ci)
        if not ci:
            raise ValidationError("CI inválido", field="ci")
        employee = await employee_crud.get_by_ci(self.db, ci)
        if employee is None:
            raise NotFoundError(f"Empleado con CI {ci} no encontrado", identifier=ci)
        return await self._with_department(employee)

    async def search_by_name(self, first_name: str, last_name_1: str, last_name_2: str) -> list[dict[str, Any]]:
        """
        Case-insensitive contains match on all three name parts.

        Raises:
            ValidationError: Any part missing
        """
        parts = [p.strip() if p else "" for p in (first_name, last_name_1, last_name_2)]
        if not all(parts):
            raise ValidationError("Nombre y ambos apellidos son requeridos")
        rows = await employee_crud.search_by_name(self.db, *parts)
        return [map_employee(row) for row in rows]

    async def by_cost_center(self, cost_center_id: str) -> list[dict[str, Any]]:
        rows = await employee_crud.get_by_cost_center(self.db, cost_center_id)
        return [map_employee(row) for row in rows]

    async def terminated(self) -> list[dict[str, Any]]:
        rows = await employee_crud.get_terminated(self.db)
        return [map_employee(row) for row in rows]

    async def by_city(self, city: str) -> list[dict[str, Any]]:
        rows = await employee_crud.get_by_city(self.db, city.strip())
        return [map_employee(row) for row in rows]
