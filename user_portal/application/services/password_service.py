"""
Password service orchestrator.

Policy validation and administrative ``unicodePwd`` resets, shared by the
self-service change and every recovery flow (PIN, email, TOTP).

Dependencies: user_portal.boundary.ldap, user_portal.core.password_policy
System role: Password change use cases
"""

import logging
from typing import Any

from user_portal.application.services.audit_log_service import AuditLogService
from user_portal.application.services.directory_lookup import (
    find_by_sam_then_employee_id,
    resolve_user_dn,
)
from user_portal.boundary.ldap import DirectoryClient
from user_portal.configs import get_settings
from user_portal.core.exceptions import (
    AuthenticationError,
    DirectoryError,
    PermissionDeniedError,
    ValidationError,
)
from user_portal.core.password_policy import validate_password_policy
from user_portal.core.ttl_cache import clear_user_caches

logger = logging.getLogger(__name__)

CONSTRAINT_VIOLATION = 19
INSUFFICIENT_ACCESS_RIGHTS = 50
UNAVAILABLE = 52
UNWILLING_TO_PERFORM = 53

AD_ERROR_MESSAGES = {
    CONSTRAINT_VIOLATION: "La contraseña no cumple las restricciones del dominio o ya fue usada anteriormente",
    INSUFFICIENT_ACCESS_RIGHTS: "Permisos insuficientes para cambiar la contraseña",
    UNAVAILABLE: "El servidor de directorio no está disponible",
    UNWILLING_TO_PERFORM: "El servidor rechazó la contraseña por la política de seguridad",
}


def translate_directory_error(error: DirectoryError) -> Exception:
    """Map AD result codes of a failed password write to portal errors."""
    message = AD_ERROR_MESSAGES.get(error.result_code or -1)
    if message is None:
        return error
    if error.result_code == INSUFFICIENT_ACCESS_RIGHTS:
        return PermissionDeniedError(message, details=error.details)
    if error.result_code in (CONSTRAINT_VIOLATION, UNWILLING_TO_PERFORM):
        return ValidationError(message, field="password", details=error.details)
    return DirectoryError(
        message, result_code=error.result_code, transient=error.transient, details=error.details
    )


class PasswordService:
    """Password change and reset orchestrator."""

    def __init__(self, directory: DirectoryClient, audit: AuditLogService) -> None:
        self.directory = directory
        self.audit = audit

    async def change_password(
        self,
        user_dn: str,
        new_password: str,
        username: str,
        display_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Validate and set a new password on *user_dn*.

        Args:
            user_dn: Target entry DN
            new_password: Candidate password
            username: sAMAccountName, used by the policy and the audit trail
            display_name: Full name, checked by the policy
            context: Extra audit details (flow that triggered the change)

        Raises:
            ValidationError: Policy violation or AD constraint
            PermissionDeniedError: The service account lacks the rights
            DirectoryError: Directory failure
        """
        valid, errors = validate_password_policy(new_password, username, display_name)
        if not valid:
            raise ValidationError("; ".join(errors), field="password", details={"errors": errors})

        details = dict(context or {})
        try:
            await self.directory.set_password(user_dn, new_password)
        except DirectoryError as e:
            details.update({"error": e.message, "result_code": e.result_code})
            await self.audit.log_password_change(username, False, details)
            logger.error(
                "Failed to set password",
                extra={"username": username, "result_code": e.result_code},
            )
            raise translate_directory_error(e) from e

        await self.audit.log_password_change(username, True, details)
        clear_user_caches(username)
        logger.info("Password changed", extra={"username": username})
        return {"success": True, "message": "Contraseña actualizada correctamente"}

    async def change_own_password(
        self,
        username: str,
        current_password: str,
        new_password: str,
    ) -> dict[str, Any]:
        """Self-service change; the current password is verified by a bind."""
        if current_password == new_password:
            raise ValidationError("La nueva contraseña debe ser diferente a la actual", field="newPassword")

        domain = get_settings().ldap.domain
        if not await self.directory.bind_as(f"{username}@{domain}", current_password):
            await self.audit.log_password_change(username, False, {"reason": "invalid_current_password"})
            raise AuthenticationError("La contraseña actual es incorrecta")

        user_dn = await resolve_user_dn(self.directory, username)
        return await self.change_password(
            user_dn, new_password, username, context={"flow": "self_service"}
        )

    async def reset_password(
        self,
        identifier: str,
        new_password: str,
        flow: str = "recovery",
    ) -> dict[str, Any]:
        """Administrative reset for a sAMAccountName or CI."""
        entry = await find_by_sam_then_employee_id(self.directory, identifier)
        username = entry.get("sAMAccountName") or identifier
        return await self.change_password(
            entry.dn,
            new_password,
            username,
            display_name=entry.get("displayName") or None,
            context={"flow": flow},
        )
