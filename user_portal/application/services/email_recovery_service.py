"""
Email recovery service.

Password reset by a code mailed to the user's backup address, and the
confirmation codes used when a user changes that address.

Dependencies: user_portal.boundary.email, user_portal.core.verification_codes
System role: Email-based recovery use cases
"""

import logging
from typing import Any

from user_portal.application.services.directory_lookup import (
    SUMMARY_ATTRIBUTES,
    find_by_sam_then_employee_id,
    find_unique_user,
    summarize_user,
)
from user_portal.application.services.password_service import PasswordService
from user_portal.boundary.email import SMTPMailer, templates
from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry, filters
from user_portal.core.exceptions import ValidationError
from user_portal.core.text import mask_email
from user_portal.core.verification_codes import (
    DEFAULT_TTL_SECONDS,
    VerificationCodeStore,
    generate_code,
)

logger = logging.getLogger(__name__)

CODE_MINUTES = DEFAULT_TTL_SECONDS // 60


def recovery_address(entry: DirectoryEntry) -> str:
    """Backup email (``company``), falling back to ``mail``."""
    backup = entry.get("company").strip()
    if backup and "@" in backup:
        return backup
    return entry.get("mail").strip()


class EmailRecoveryService:
    def __init__(
        self,
        directory: DirectoryClient,
        mailer: SMTPMailer,
        codes: VerificationCodeStore,
        passwords: PasswordService,
    ) -> None:
        self.directory = directory
        self.mailer = mailer
        self.codes = codes
        self.passwords = passwords

    async def _send_code(self, email: str, user_name: str) -> None:
        code = generate_code()
        subject, html, text = templates.verification_code(user_name, code, CODE_MINUTES)
        await self.mailer.send(email, subject, html, text)
        # Only codes that actually left through the relay are stored
        self.codes.set_code(email, code)

    async def forgot_password(self, identifier: str) -> dict[str, Any]:
        """
        Mail a reset code to the account's recovery address.

        Raises:
            ValidationError: Missing identifier, or no address on file
            NotFoundError: Unknown account
            UpstreamServiceError: Mail quota exhausted or relay failure
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("Identificador requerido", field="identifier")

        entry = await find_by_sam_then_employee_id(self.directory, identifier)
        email = recovery_address(entry)
        if not email:
            raise ValidationError("El usuario no tiene un correo de recuperación registrado")

        user = summarize_user(entry)
        await self._send_code(email, user["displayName"] or user["sAMAccountName"])
        logger.info("Recovery code sent", extra={"username": user["sAMAccountName"]})
        return {
            "success": True,
            "message": "Código enviado al correo registrado",
            "email": mask_email(email),
            "displayName": user["displayName"],
            "sAMAccountName": user["sAMAccountName"],
            "employeeID": user["employeeID"],
            "userPrincipalName": user["userPrincipalName"],
            "dn": user["dn"],
            "accountStatus": user["accountStatus"],
            "emailStats": self.mailer.stats(),
        }

    async def reset_password(self, email: str, code: str, new_password: str) -> dict[str, Any]:
        """
        Reset the password of the account that owns *email*.

        Raises:
            ValidationError: Invalid or expired code
            NotFoundError: No account uses the address
        """
        email = (email or "").strip()
        if not email or not code:
            raise ValidationError("Correo y código son requeridos")
        if not self.codes.verify_code(email, code):
            raise ValidationError("Código inválido o expirado", field="code")

        entry = await find_unique_user(self.directory, filters.by_email(email), email, SUMMARY_ATTRIBUTES)
        return await self.passwords.change_password(
            entry.dn,
            new_password,
            entry.get("sAMAccountName") or email,
            display_name=entry.get("displayName") or None,
            context={"flow": "email_recovery"},
        )

    async def send_verification(self, email: str, user_name: str = "Usuario") -> dict[str, Any]:
        """Mail a confirmation code before a backup address is saved."""
        email = (email or "").strip()
        if "@" not in email:
            raise ValidationError("Correo inválido", field="email")
        await self._send_code(email, user_name)
        return {"success": True, "message": "Código de verificación enviado", "email": mask_email(email)}

    def verify_code(self, email: str, code: str) -> dict[str, Any]:
        if not self.codes.verify_code(email or "", code or ""):
            raise ValidationError("Código inválido o expirado", field="code")
        return {"success": True, "verified": True}

    async def check_user(self, identifier: str) -> dict[str, Any]:
        entry = await find_by_sam_then_employee_id(self.directory, identifier.strip())
        email = recovery_address(entry)
        user = summarize_user(entry)
        return {
            "exists": True,
            "hasRecoveryEmail": bool(email),
            "email": mask_email(email) if email else None,
            "sAMAccountName": user["sAMAccountName"],
            "displayName": user["displayName"],
        }

    def stats(self) -> dict[str, Any]:
        return self.mailer.stats()
