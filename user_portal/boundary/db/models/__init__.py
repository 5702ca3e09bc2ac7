"""
Database models package.

Exports:
  - AuditLogModel: Audit trail rows
  - EmployeeModel, DepartmentModel: HR records
  - DeviceModel, DeviceType: Registered network devices

Dependencies: sqlalchemy, user_portal.boundary.db.base
System role: Database model definitions for domain entities
"""

from user_portal.boundary.db.models.audit_log_model import AuditLogModel
from user_portal.boundary.db.models.device_model import DeviceModel, DeviceType
from user_portal.boundary.db.models.employee_model import DepartmentModel, EmployeeModel

__all__ = [
    "AuditLogModel",
    "DepartmentModel",
    "DeviceModel",
    "DeviceType",
    "EmployeeModel",
]
