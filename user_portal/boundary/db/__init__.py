"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, TimestampMixin, UUIDMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - init_models(), ping_database(): Startup and health helpers
  - AuditLogModel, EmployeeModel, DepartmentModel, DeviceModel: Domain entities

Dependencies: sqlalchemy, user_portal.configs
System role: Database adapter for the audit trail, HR records and devices
"""

from user_portal.boundary.db.base import Base, TimestampMixin, UUIDMixin
from user_portal.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
    ping_database,
)
from user_portal.boundary.db.models import (
    AuditLogModel,
    DepartmentModel,
    DeviceModel,
    DeviceType,
    EmployeeModel,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    "ping_database",
    # Models
    "AuditLogModel",
    "DepartmentModel",
    "DeviceModel",
    "DeviceType",
    "EmployeeModel",
]
