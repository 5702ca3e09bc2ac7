"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_account_service,
    get_audit_log_service,
    get_auth_service,
    get_device_service,
    get_directory,
    get_email_recovery_service,
    get_employee_service,
    get_identity_service,
    get_password_expiry_service,
    get_password_service,
    get_pin_service,
    get_settings_dependency,
    get_student_service,
    get_totp_verification_service,
    get_two_factor_service,
    get_user_directory_service,
    get_username_service,
)

__all__ = [
    "get_account_service",
    "get_audit_log_service",
    "get_auth_service",
    "get_device_service",
    "get_directory",
    "get_email_recovery_service",
    "get_employee_service",
    "get_identity_service",
    "get_password_expiry_service",
    "get_password_service",
    "get_pin_service",
    "get_settings_dependency",
    "get_student_service",
    "get_totp_verification_service",
    "get_two_factor_service",
    "get_user_directory_service",
    "get_username_service",
]
