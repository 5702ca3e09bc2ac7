"""
API routes module.

FastAPI routers for all HTTP endpoints, collected into one router that
the application mounts under /api.
"""

from fastapi import APIRouter

from .routers import (
    accounts_router,
    auth_router,
    devices_router,
    email_router,
    employees_router,
    health_router,
    identity_router,
    logs_router,
    password_router,
    pin_router,
    students_router,
    totp_router,
    two_factor_router,
    usernames_router,
    users_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(password_router)
api_router.include_router(two_factor_router)
api_router.include_router(totp_router)
api_router.include_router(pin_router)
api_router.include_router(users_router)
api_router.include_router(students_router)
api_router.include_router(identity_router)
api_router.include_router(usernames_router)
api_router.include_router(accounts_router)
api_router.include_router(employees_router)
api_router.include_router(devices_router)
api_router.include_router(logs_router)
api_router.include_router(email_router)

__all__ = ["api_router"]
