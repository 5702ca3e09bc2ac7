"""Service orchestrators."""

from .account_service import AccountService
from .audit_log_service import AuditLogService
from .auth_service import AuthService
from .device_service import DeviceService
from .email_recovery_service import EmailRecoveryService
from .employee_service import EmployeeService
from .identity_service import IdentityService
from .password_expiry_service import PasswordExpiryService
from .password_service import PasswordService
from .pin_service import PinService
from .student_service import StudentService
from .totp_verification_service import TOTPVerificationService
from .two_factor_service import TwoFactorService
from .user_directory_service import UserDirectoryService
from .username_service import UsernameService

__all__ = [
    "AccountService",
    "AuditLogService",
    "AuthService",
    "DeviceService",
    "EmailRecoveryService",
    "EmployeeService",
    "IdentityService",
    "PasswordExpiryService",
    "PasswordService",
    "PinService",
    "StudentService",
    "TOTPVerificationService",
    "TwoFactorService",
    "UserDirectoryService",
    "UsernameService",
]
