"""
TOTP recovery verification.

Lets a user who lost their password prove possession of the
authenticator registered with ``TwoFactorService``.

Dependencies: user_portal.boundary.ldap, user_portal.core.totp,
    user_portal.application.services.password_service
System role: Authenticator-based recovery use cases
"""

import logging
from typing import Any

from user_portal.application.services.directory_lookup import (
    SUMMARY_ATTRIBUTES,
    find_unique_user,
    summarize_user,
)
from user_portal.application.services.password_service import PasswordService
from user_portal.application.services.two_factor_service import (
    ENABLED,
    FLAG_ATTRIBUTE,
    SECRET_ATTRIBUTE,
)
from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry, filters
from user_portal.core import totp
from user_portal.core.encryption import EncryptionService
from user_portal.core.exceptions import AuthenticationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TOTP_ATTRIBUTES = SUMMARY_ATTRIBUTES + [FLAG_ATTRIBUTE, SECRET_ATTRIBUTE]


class TOTPVerificationService:
    def __init__(
        self,
        directory: DirectoryClient,
        encryption: EncryptionService,
        passwords: PasswordService,
    ) -> None:
        self.directory = directory
        self.encryption = encryption
        self.passwords = passwords

    async def _find(self, identifier: str) -> DirectoryEntry:
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("Identificador requerido", field="identifier")
        return await find_unique_user(
            self.directory, filters.by_any_identifier(identifier), identifier, TOTP_ATTRIBUTES
        )

    def _secret_of(self, entry: DirectoryEntry) -> str | None:
        raw = self.encryption.extract_from_storage(entry.get(SECRET_ATTRIBUTE))
        if raw is None:
            return None
        secret = totp.clean_secret(raw)
        return secret if totp.is_valid_secret(secret) else None

    async def check_user(self, identifier: str) -> dict[str, Any]:
        entry = await self._find(identifier)
        return {
            "user": summarize_user(entry),
            "has2FA": entry.get(FLAG_ATTRIBUTE) == ENABLED and self._secret_of(entry) is not None,
        }

    async def verify(self, identifier: str, code: str) -> dict[str, Any]:
        """
        Check an authenticator code for the account.

        Raises:
            ValidationError: Code is not six digits
            NotFoundError: No account, or no usable secret stored
            AuthenticationError: Wrong code
        """
        code = (code or "").strip()
        if not totp.is_valid_code(code):
            raise ValidationError("El código debe tener 6 dígitos", field="code")

        entry = await self._find(identifier)
        secret = self._secret_of(entry)
        if secret is None:
            raise NotFoundError("El usuario no tiene 2FA configurado", identifier=identifier)

        if not totp.verify_code(secret, code):
            logger.info("TOTP code rejected", extra={"username": entry.get("sAMAccountName")})
            raise AuthenticationError("Código TOTP inválido")

        return {"valid": True, "user": summarize_user(entry)}

    async def get_totp_info(self, identifier: str) -> dict[str, Any]:
        entry = await self._find(identifier)
        return {
            "hasTOTPSecret": self._secret_of(entry) is not None,
            "sAMAccountName": entry.get("sAMAccountName"),
        }

    async def reset_password(self, identifier: str, code: str, new_password: str) -> dict[str, Any]:
        """
        Reset the password after a successful authenticator check.

        Raises:
            ValidationError: Code format or password policy
            AuthenticationError: Wrong code
            NotFoundError: Unknown account or no secret
        """
        verified = await self.verify(identifier, code)
        username = verified["user"]["sAMAccountName"] or identifier
        return await self.passwords.reset_password(username, new_password, flow="totp_recovery")
