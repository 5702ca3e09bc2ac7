"""
Identity verification service.

Decides whether an identity card belongs to an active student (SIGENU) or
a current employee (HR database) before an account is created.

Dependencies: StudentService, EmployeeService
System role: Identity verification use cases
"""

import logging
from typing import Any

from user_portal.application.services.employee_service import EmployeeService
from user_portal.application.services.student_service import (
    StudentService,
    is_active_student,
    is_graduated,
    student_status,
)
from user_portal.core.exceptions import NotFoundError, ValidationError
from user_portal.core.text import sanitize_ci

logger = logging.getLogger(__name__)


def summarize_student(data: dict[str, Any]) -> dict[str, Any]:
    """Public view of an active student, from a transformed SIGENU file."""
    personal = data["personalData"]
    academic = data["academicData"]
    year = str((data["rawData"].get("docentData") or {}).get("year") or "")
    return {
        "fullName": personal["fullName"],
        "career": academic["career"],
        "faculty": academic["faculty"],
        "academicYear": int(year) if year.isascii() and year.isdigit() else None,
        "status": "active",
        "ci": personal["identification"],
    }


class IdentityService:
    def __init__(self, students: StudentService, employees: EmployeeService) -> None:
        self.students = students
        self.employees = employees

    @staticmethod
    def _clean(ci: str) -> str:
        clean = sanitize_ci(ci)
        if not clean:
            raise ValidationError("CI inválido", field="ci")
        return clean

    async def verify_ci(self, ci: str) -> dict[str, Any]:
        """
        Classify a CI as student or employee.

        Returns:
            dict: type ("student" or "employee") with the student summary or
            the employee record

        Raises:
            NotFoundError: Neither an active student nor a current employee
        """
        ci = self._clean(ci)

        student = await self.students.find(ci)
        if student is not None and is_active_student(student["rawData"]):
            logger.info("CI verified as student", extra={"ci": ci})
            return {"type": "student", "data": summarize_student(student)}

        employee = await self.employees.find_active(ci)
        if employee is not None:
            logger.info("CI verified as employee", extra={"ci": ci})
            return {"type": "employee", "data": employee}

        raise NotFoundError(
            "El CI no corresponde a un estudiante activo ni a un trabajador", identifier=ci
        )

    async def dual_status(self, ci: str) -> dict[str, Any]:
        """Whether the person is both an employee and a current student."""
        ci = self._clean(ci)
        employee = await self.employees.find_active(ci)
        raw = await self.students.find_raw(ci)

        graduated = raw is not None and is_graduated(raw)
        is_student = raw is not None and (is_active_student(raw) or graduated)
        return {
            "isEmployee": employee is not None,
            "employeeData": employee,
            "studentData": raw if is_student else None,
            "isGraduated": graduated,
            "studentStatus": student_status(raw) if raw is not None else None,
            "hasDualOccupation": employee is not None and is_student and not graduated,
        }
