"""
Employee and department ORM models.

Read-mostly copy of the HR payroll tables (``Empleados_Gral`` and
``RH_Plantilla``) used to verify staff identity and build accounts.

Dependencies: sqlalchemy, user_portal.boundary.db.base
System role: Employee records persistence
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from user_portal.boundary.db.base import Base, TimestampMixin, UUIDMixin


class EmployeeModel(Base, UUIDMixin, TimestampMixin):
    """
    Staff member as registered by HR.

    Attributes:
        ci: National identity card number (unique)
        first_name: Given names
        last_name_1: First surname
        last_name_2: Second surname
        cost_center_id: Payroll cost center
        direction_id: Organizational unit, joins DepartmentModel.direction_id
        city: City of residence
        is_terminated: True once the employee has left (Baja)
    """

    __tablename__ = "employees"

    ci: Mapped[str] = mapped_column(String(11), nullable=False, unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name_1: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name_2: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    cost_center_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    direction_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_terminated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name_1, self.last_name_2) if p)


class DepartmentModel(Base, UUIDMixin, TimestampMixin):
    """Organizational unit description keyed by direction ID."""

    __tablename__ = "departments"

    direction_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
