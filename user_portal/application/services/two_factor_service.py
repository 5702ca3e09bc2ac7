"""
Two-factor authentication service.

2FA state lives in the directory: ``userParameters`` holds the on/off
flag and ``employeeNumber`` the encrypted TOTP seed.

Dependencies: user_portal.boundary.ldap, user_portal.core.encryption, pyotp
System role: 2FA activation use cases
"""

import logging
from typing import Any

from user_portal.application.services.directory_lookup import resolve_user_dn
from user_portal.boundary.ldap import DirectoryClient, filters
from user_portal.configs import get_settings
from user_portal.core import totp
from user_portal.core.encryption import (
    EncryptionService,
    is_valid_totp_secret,
    normalize_totp_secret,
)
from user_portal.core.exceptions import NotFoundError, ValidationError
from user_portal.core.ttl_cache import clear_user_caches

logger = logging.getLogger(__name__)

FLAG_ATTRIBUTE = "userParameters"
SECRET_ATTRIBUTE = "employeeNumber"

ENABLED = "2FA ENABLED"
DISABLED = "2FA DISABLED"
# employeeNumber must never be left empty
SECRET_CLEARED = "2FA DESACTIVADO"


class TwoFactorService:
    """Activate, inspect and deactivate directory-backed 2FA."""

    def __init__(self, directory: DirectoryClient, encryption: EncryptionService) -> None:
        self.directory = directory
        self.encryption = encryption

    async def activate(self, sam: str, secret: str) -> dict[str, Any]:
        """
        Store an encrypted TOTP seed and flag the account.

        Raises:
            ValidationError: Secret is not 16/32 base32 characters
            NotFoundError: Unknown account
        """
        secret = normalize_totp_secret(secret or "")
        if not is_valid_totp_secret(secret):
            raise ValidationError("Formato de secreto inválido", field="secret")

        user_dn = await resolve_user_dn(self.directory, sam)
        await self.directory.modify_replace(user_dn, {FLAG_ATTRIBUTE: ENABLED})
        await self.directory.modify_replace(
            user_dn, {SECRET_ATTRIBUTE: self.encryption.format_for_storage(secret)}
        )
        clear_user_caches(sam)
        logger.info("2FA activated", extra={"username": sam})
        return {"success": True, "message": "2FA activado correctamente", "sAMAccountName": sam}

    async def status(self, sam: str) -> dict[str, Any]:
        entry = await self.directory.find_one(
            filters.by_sam(sam), attributes=[FLAG_ATTRIBUTE, SECRET_ATTRIBUTE]
        )
        if entry is None:
            raise NotFoundError(f"Usuario {sam} no encontrado", identifier=sam)
        stored = entry.get(SECRET_ATTRIBUTE)
        return {
            "enabled": entry.get(FLAG_ATTRIBUTE) == ENABLED,
            "hasSecret": self.encryption.extract_from_storage(stored) is not None,
            "sAMAccountName": sam,
        }

    async def deactivate(self, sam: str) -> dict[str, Any]:
        user_dn = await resolve_user_dn(self.directory, sam)
        await self.directory.modify_replace(user_dn, {FLAG_ATTRIBUTE: DISABLED})
        await self.directory.modify_replace(user_dn, {SECRET_ATTRIBUTE: SECRET_CLEARED})
        clear_user_caches(sam)
        logger.info("2FA deactivated", extra={"username": sam})
        return {"success": True, "message": "2FA desactivado correctamente", "sAMAccountName": sam}

    def generate_secret(self, sam: str) -> dict[str, Any]:
        """New seed plus backup codes; nothing is stored until ``activate``."""
        secret = totp.generate_secret()
        return {
            "secret": secret,
            "backupCodes": totp.generate_backup_codes(),
            "otpauthUrl": totp.provisioning_uri(secret, sam, get_settings().security.totp_issuer),
        }
