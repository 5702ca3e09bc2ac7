"""
Dependency injection container.

Factory functions for FastAPI dependencies. Process-wide clients (LDAP
pool, SIGENU, SMTP, encryption) are singletons; services are built per
request around them.

Dependencies: user_portal.configs, user_portal.application, user_portal.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.application.services import (
    AccountService,
    AuditLogService,
    AuthService,
    DeviceService,
    EmailRecoveryService,
    EmployeeService,
    IdentityService,
    PasswordExpiryService,
    PasswordService,
    PinService,
    StudentService,
    TOTPVerificationService,
    TwoFactorService,
    UserDirectoryService,
    UsernameService,
)
from user_portal.boundary.db import get_async_db
from user_portal.boundary.email import SMTPMailer, get_mailer
from user_portal.boundary.ldap import DirectoryClient, get_directory_client
from user_portal.boundary.sigenu import SigenuClient, get_sigenu_client
from user_portal.configs import Settings, get_settings
from user_portal.core.encryption import EncryptionService, get_encryption_service
from user_portal.core.verification_codes import VerificationCodeStore, verification_store


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_directory() -> DirectoryClient:
    return get_directory_client()


def get_encryption() -> EncryptionService:
    return get_encryption_service()


def get_sigenu() -> SigenuClient:
    return get_sigenu_client()


def get_smtp_mailer() -> SMTPMailer:
    return get_mailer()


def get_verification_store() -> VerificationCodeStore:
    return verification_store


def get_audit_log_service(db: AsyncSession = Depends(get_async_db)) -> AuditLogService:
    """
    Get audit log service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        AuditLogService: Audit log service instance
    """
    return AuditLogService(db=db)


def get_auth_service(
    directory: DirectoryClient = Depends(get_directory),
    audit: AuditLogService = Depends(get_audit_log_service),
) -> AuthService:
    return AuthService(directory=directory, audit=audit)


def get_password_service(
    directory: DirectoryClient = Depends(get_directory),
    audit: AuditLogService = Depends(get_audit_log_service),
) -> PasswordService:
    """
    Get password service instance.

    Args:
        directory: Directory client (injected)
        audit: Audit trail for every change attempt (injected)

    Returns:
        PasswordService: Password service instance
    """
    return PasswordService(directory=directory, audit=audit)


def get_two_factor_service(
    directory: DirectoryClient = Depends(get_directory),
    encryption: EncryptionService = Depends(get_encryption),
) -> TwoFactorService:
    return TwoFactorService(directory=directory, encryption=encryption)


def get_totp_verification_service(
    directory: DirectoryClient = Depends(get_directory),
    encryption: EncryptionService = Depends(get_encryption),
    passwords: PasswordService = Depends(get_password_service),
) -> TOTPVerificationService:
    return TOTPVerificationService(directory=directory, encryption=encryption, passwords=passwords)


def get_pin_service(
    directory: DirectoryClient = Depends(get_directory),
    encryption: EncryptionService = Depends(get_encryption),
    passwords: PasswordService = Depends(get_password_service),
) -> PinService:
    return PinService(directory=directory, encryption=encryption, passwords=passwords)


def get_user_directory_service(
    directory: DirectoryClient = Depends(get_directory),
) -> UserDirectoryService:
    return UserDirectoryService(directory=directory)


def get_student_service(sigenu: SigenuClient = Depends(get_sigenu)) -> StudentService:
    return StudentService(sigenu=sigenu)


def get_employee_service(db: AsyncSession = Depends(get_async_db)) -> EmployeeService:
    """
    Get employee service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        EmployeeService: Employee service instance
    """
    return EmployeeService(db=db)


def get_identity_service(
    students: StudentService = Depends(get_student_service),
    employees: EmployeeService = Depends(get_employee_service),
) -> IdentityService:
    return IdentityService(students=students, employees=employees)


def get_username_service(
    directory: DirectoryClient = Depends(get_directory),
    students: StudentService = Depends(get_student_service),
    employees: EmployeeService = Depends(get_employee_service),
) -> UsernameService:
    return UsernameService(directory=directory, students=students, employees=employees)


def get_account_service(
    directory: DirectoryClient = Depends(get_directory),
    students: StudentService = Depends(get_student_service),
    employees: EmployeeService = Depends(get_employee_service),
    mailer: SMTPMailer = Depends(get_smtp_mailer),
    codes: VerificationCodeStore = Depends(get_verification_store),
) -> AccountService:
    """
    Get account service instance.

    Returns:
        AccountService: Account lifecycle service wired to the directory,
        SIGENU, the HR database and the mailer
    """
    return AccountService(
        directory=directory, students=students, employees=employees, mailer=mailer, codes=codes
    )


def get_device_service(db: AsyncSession = Depends(get_async_db)) -> DeviceService:
    return DeviceService(db=db)


def get_email_recovery_service(
    directory: DirectoryClient = Depends(get_directory),
    mailer: SMTPMailer = Depends(get_smtp_mailer),
    codes: VerificationCodeStore = Depends(get_verification_store),
    passwords: PasswordService = Depends(get_password_service),
) -> EmailRecoveryService:
    return EmailRecoveryService(directory=directory, mailer=mailer, codes=codes, passwords=passwords)


def get_password_expiry_service(
    directory: DirectoryClient = Depends(get_directory),
    mailer: SMTPMailer = Depends(get_smtp_mailer),
) -> PasswordExpiryService:
    return PasswordExpiryService(directory=directory, mailer=mailer)
