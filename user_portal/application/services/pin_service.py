"""
Recovery PIN service.

A six digit PIN, encrypted into the ``serialNumber`` attribute, lets a
user reset a forgotten password without email access.

Dependencies: user_portal.boundary.ldap, user_portal.core.encryption
System role: PIN-based recovery use cases
"""

import logging
import secrets
from typing import Any

from user_portal.application.services.directory_lookup import (
    SUMMARY_ATTRIBUTES,
    find_by_sam_then_employee_id,
    summarize_user,
)
from user_portal.application.services.password_service import PasswordService
from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry
from user_portal.boundary.ldap.client import NO_SUCH_ATTRIBUTE
from user_portal.core.encryption import EncryptionService
from user_portal.core.exceptions import (
    AuthenticationError,
    DirectoryError,
    NotFoundError,
    ValidationError,
)
from user_portal.core.pin_policy import looks_encrypted, validate_pin
from user_portal.core.ttl_cache import clear_user_caches

logger = logging.getLogger(__name__)

PIN_ATTRIBUTE = "serialNumber"
# AD rejects an empty replace on serialNumber, a blank marks "no PIN"
PIN_CLEARED = " "

PIN_ATTRIBUTES = SUMMARY_ATTRIBUTES + [PIN_ATTRIBUTE]


class PinService:
    """Save, verify and use recovery PINs."""

    def __init__(
        self,
        directory: DirectoryClient,
        encryption: EncryptionService,
        passwords: PasswordService,
    ) -> None:
        self.directory = directory
        self.encryption = encryption
        self.passwords = passwords

    async def find_user(self, identifier: str) -> DirectoryEntry:
        """Look up by sAMAccountName, then by employeeID."""
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("Identificador requerido", field="identifier")
        return await find_by_sam_then_employee_id(self.directory, identifier, PIN_ATTRIBUTES)

    async def save(self, sam: str, pin: str) -> dict[str, Any]:
        """
        Encrypt and store a PIN.

        Raises:
            ValidationError: PIN fails the policy
            NotFoundError: Unknown account
        """
        valid, reason = validate_pin(pin)
        if not valid:
            raise ValidationError(reason or "PIN inválido", field="pin")

        entry = await self.find_user(sam)
        encrypted = self.encryption.encrypt(pin)
        try:
            await self.directory.modify_replace(entry.dn, {PIN_ATTRIBUTE: encrypted})
        except DirectoryError as e:
            if e.result_code != NO_SUCH_ATTRIBUTE:
                raise
            await self.directory.modify_add(entry.dn, {PIN_ATTRIBUTE: encrypted})

        clear_user_caches(sam)
        logger.info("PIN saved", extra={"username": sam})
        return {"success": True, "message": "PIN guardado correctamente"}

    async def remove(self, sam: str) -> dict[str, Any]:
        entry = await self.find_user(sam)
        await self.directory.modify_replace(entry.dn, {PIN_ATTRIBUTE: PIN_CLEARED})
        clear_user_caches(sam)
        logger.info("PIN removed", extra={"username": sam})
        return {"success": True, "message": "PIN eliminado correctamente"}

    async def has_pin(self, sam: str) -> bool:
        entry = await self.find_user(sam)
        return looks_encrypted(entry.get(PIN_ATTRIBUTE))

    async def check_user_has_pin(self, identifier: str) -> dict[str, Any]:
        entry = await self.find_user(identifier)
        return {
            "hasPin": looks_encrypted(entry.get(PIN_ATTRIBUTE)),
            "sAMAccountName": entry.get("sAMAccountName"),
        }

    async def verify_for_recovery(self, identifier: str, pin: str) -> dict[str, Any]:
        """
        Check a PIN before a password reset.

        Returns:
            dict: userDN and the public user data

        Raises:
            NotFoundError: Unknown account or no PIN registered
            AuthenticationError: Wrong PIN
        """
        if not pin:
            raise ValidationError("PIN requerido", field="pin")

        entry = await self.find_user(identifier)
        stored = entry.get(PIN_ATTRIBUTE)
        if not looks_encrypted(stored):
            raise NotFoundError("El usuario no tiene PIN configurado", identifier=identifier)

        try:
            expected = self.encryption.decrypt(stored)
        except ValueError:
            logger.warning("Stored PIN could not be decrypted", extra={"identifier": identifier})
            raise NotFoundError("El usuario no tiene PIN configurado", identifier=identifier)

        if not secrets.compare_digest(expected.encode(), pin.strip().encode()):
            logger.info("PIN rejected", extra={"identifier": identifier})
            raise AuthenticationError("PIN incorrecto")

        return {"userDN": entry.dn, "userData": summarize_user(entry)}

    async def reset_password_with_pin(
        self,
        identifier: str,
        pin: str,
        new_password: str,
    ) -> dict[str, Any]:
        verified = await self.verify_for_recovery(identifier, pin)
        username = verified["userData"]["sAMAccountName"] or identifier
        return await self.passwords.reset_password(username, new_password, flow="pin_recovery")
