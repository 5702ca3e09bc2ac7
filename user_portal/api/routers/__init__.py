"""API routers."""

from .accounts import router as accounts_router
from .auth import router as auth_router
from .email import router as email_router
from .employees import router as employees_router
from .devices import router as devices_router
from .health import router as health_router
from .identity import router as identity_router
from .logs import router as logs_router
from .password import router as password_router
from .pin import router as pin_router
from .students import router as students_router
from .totp import router as totp_router
from .two_factor import router as two_factor_router
from .usernames import router as usernames_router
from .users import router as users_router

__all__ = [
    "accounts_router",
    "auth_router",
    "devices_router",
    "email_router",
    "employees_router",
    "health_router",
    "identity_router",
    "logs_router",
    "password_router",
    "pin_router",
    "students_router",
    "totp_router",
    "two_factor_router",
    "usernames_router",
    "users_router",
]
