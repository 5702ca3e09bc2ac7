"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from user_portal.boundary.db.CRUD import employee_crud, audit_log_crud

    employee = await employee_crud.get_by_ci(db, "85010112345")
"""

from user_portal.boundary.db.CRUD.base_crud import BaseCRUD
from user_portal.boundary.db.CRUD.audit_log_crud import AuditLogCRUD, AuditLogFilter, audit_log_crud
from user_portal.boundary.db.CRUD.device_crud import DeviceCRUD, device_crud
from user_portal.boundary.db.CRUD.employee_crud import (
    DepartmentCRUD,
    EmployeeCRUD,
    department_crud,
    employee_crud,
)

__all__ = [
    "BaseCRUD",
    "AuditLogCRUD",
    "AuditLogFilter",
    "audit_log_crud",
    "DeviceCRUD",
    "device_crud",
    "EmployeeCRUD",
    "employee_crud",
    "DepartmentCRUD",
    "department_crud",
]
