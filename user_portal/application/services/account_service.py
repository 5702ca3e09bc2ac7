"""
Account lifecycle service.

Creates student and employee accounts in the directory, removes them and
maintains the few profile attributes users may edit themselves.

Student accounts land in an OU tree mirroring SIGENU:
``OU={year},OU={courseType},OU={career},OU={faculty},OU=SIGENU,{base}``.
Missing OUs along the path are created on demand.

Dependencies: user_portal.boundary.ldap, user_portal.boundary.email,
              StudentService, EmployeeService, PasswordService
System role: Account creation and maintenance use cases
"""

import logging
import re
from typing import Any

from ldap3.utils.dn import escape_rdn

from user_portal.application.services.directory_lookup import find_unique_user, resolve_user_dn
from user_portal.application.services.employee_service import EmployeeService
from user_portal.application.services.student_service import StudentService, is_active_student
from user_portal.application.services.user_directory_service import map_user
from user_portal.boundary.email import SMTPMailer, templates
from user_portal.boundary.ldap import DirectoryClient, filters
from user_portal.configs import get_settings
from user_portal.core.exceptions import (
    ConflictError,
    NotFoundError,
    PortalError,
    UpstreamServiceError,
    ValidationError,
)
from user_portal.core.password_policy import validate_password_policy
from user_portal.core.text import sanitize_ci, strip_accents
from user_portal.core.ttl_cache import clear_user_caches
from user_portal.core.verification_codes import VerificationCodeStore, verification_store

logger = logging.getLogger(__name__)

USER_OBJECT_CLASSES = ["top", "person", "organizationalPerson", "user"]
OU_OBJECT_CLASSES = ["top", "organizationalUnit"]
NORMAL_ACCOUNT = 512

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[a-z0-9]{3,20}$")


def sanitize_ou_name(value: str) -> str:
    """Accent-free OU value without DN special characters."""
    clean = re.sub(r'[,+"\\<>;=#/]', " ", strip_accents(value or ""))
    return re.sub(r"\s+", " ", clean).strip()


def title_case(value: str) -> str:
    return " ".join(word.capitalize() for word in (value or "").split())


class AccountService:
    """Directory account lifecycle."""

    def __init__(
        self,
        directory: DirectoryClient,
        students: StudentService,
        employees: EmployeeService,
        mailer: SMTPMailer | None = None,
        codes: VerificationCodeStore = verification_store,
    ) -> None:
        self.directory = directory
        self.students = students
        self.employees = employees
        self.mailer = mailer
        self.codes = codes
        self.settings = get_settings().ldap

    async def _ensure_username_free(self, username: str) -> str:
        username = (username or "").strip().lower()
        if not USERNAME_PATTERN.match(username):
            raise ValidationError("Nombre de usuario inválido", field="username")
        if await self.directory.find_one(filters.by_sam(username), attributes=["sAMAccountName"]):
            raise ConflictError(f"El nombre de usuario {username} ya existe")
        return username

    async def _ensure_no_account_for(self, ci: str) -> None:
        existing = await self.directory.find_one(
            f"(employeeID={filters.escape(ci)})", attributes=["sAMAccountName"]
        )
        if existing is not None:
            raise ConflictError(
                f"Ya existe una cuenta para el CI {ci}: {existing.get('sAMAccountName')}"
            )

    async def ensure_ou_path(self, ou_names: list[str], parent_dn: str) -> str:
        """
        Create each OU under *parent_dn* in order, outermost first.

        Returns:
            str: DN of the innermost OU
        """
        dn = parent_dn
        for name in ou_names:
            dn = f"OU={escape_rdn(name)},{dn}"
            if not await self.directory.exists(dn):
                await self.directory.add(dn, OU_OBJECT_CLASSES, {"ou": name})
                logger.info("Created organizational unit", extra={"dn": dn})
        return dn

    async def _create_user(
        self,
        parent_dn: str,
        username: str,
        password: str,
        attributes: dict[str, Any],
        groups: list[str],
    ) -> str:
        dn = f"CN={escape_rdn(attributes['cn'])},{parent_dn}"
        attributes = {key: value for key, value in attributes.items() if value not in (None, "")}
        await self.directory.add(dn, USER_OBJECT_CLASSES, attributes)
        try:
            await self.directory.set_password(dn, password)
            await self.directory.modify_replace(dn, {"userAccountControl": str(NORMAL_ACCOUNT)})
            for group in groups:
                await self.directory.add_member(self.settings.absolute(group), dn)
        except PortalError:
            logger.error("Account setup failed, removing partial entry", extra={"dn": dn})
            await self.directory.delete(dn)
            raise
        logger.info("Account created", extra={"username": username, "dn": dn})
        return dn

    async def _send_welcome(self, email: str | None, name: str, username: str, user_type: str) -> None:
        if not email or self.mailer is None:
            return
        subject, html, text = templates.welcome(name, username, user_type)
        try:
            await self.mailer.send(email, subject, html, text)
        except UpstreamServiceError as e:
            logger.warning("Welcome email not sent", extra={"username": username, "error": e.message})

    def _check_password(self, password: str, username: str, display_name: str) -> None:
        valid, errors = validate_password_policy(password, username, display_name)
        if not valid:
            raise ValidationError("; ".join(errors), field="password", details={"errors": errors})

    async def create_student_account(
        self,
        ci: str,
        username: str,
        password: str,
        email: str | None = None,
    ) -> dict[str, Any]:
        """
        Create the account of an active SIGENU student.

        Raises:
            NotFoundError: No active student for the CI
            ConflictError: Username taken or the CI already has an account
            ValidationError: Bad username, password or backup email
        """
        ci = sanitize_ci(ci)
        if not ci:
            raise ValidationError("CI inválido", field="ci")
        if email and not EMAIL_PATTERN.match(email):
            raise ValidationError("Correo de respaldo inválido", field="email")

        student = await self.students.get_student(ci)
        data = student["data"]
        raw = data["rawData"]
        if not is_active_student(raw):
            raise NotFoundError(f"No hay un estudiante activo con CI {ci}", identifier=ci)

        personal = raw.get("personalData") or {}
        docent = raw.get("docentData") or {}
        full_name = title_case(data["personalData"]["fullName"])
        username = await self._ensure_username_free(username)
        await self._ensure_no_account_for(ci)
        self._check_password(password, username, full_name)

        year = re.sub(r"\D", "", str(docent.get("year") or "")) or "0"
        parent_dn = await self.ensure_ou_path(
            [
                sanitize_ou_name(data["academicData"]["faculty"]),
                sanitize_ou_name(data["academicData"]["career"]),
                sanitize_ou_name(str(docent.get("courseType") or "Curso Diurno")),
                year,
            ],
            self.settings.absolute(self.settings.students_ou),
        )

        surnames = " ".join(p for p in (personal.get("middleName"), personal.get("lastName")) if p)
        domain = self.settings.domain
        attributes = {
            "cn": f"Estudiante {full_name}",
            "sAMAccountName": username,
            "userPrincipalName": f"{username}@{domain}",
            "givenName": title_case(str(personal.get("name") or "")),
            "sn": title_case(surnames),
            "displayName": full_name,
            "mail": f"{username}@{domain}",
            "company": email,
            "employeeID": ci,
            "telephoneNumber": personal.get("phone"),
            "streetAddress": data["personalData"]["address"],
            "st": personal.get("province"),
            "description": f"Estudiante de {data['academicData']['career']}",
            "title": "Estudiante",
            "employeeType": "Estudiante",
            "departmentNumber": data["academicData"]["year"],
            "department": data["academicData"]["career"],
            "ou": data["academicData"]["faculty"],
        }
        dn = await self._create_user(parent_dn, username, password, attributes, self.settings.student_groups)
        await self._send_welcome(email, full_name, username, "Estudiante")
        return {
            "success": True,
            "message": "Cuenta de estudiante creada correctamente",
            "sAMAccountName": username,
            "userPrincipalName": f"{username}@{domain}",
            "dn": dn,
        }

    async def create_employee_account(self, ci: str, username: str, password: str) -> dict[str, Any]:
        """
        Create the account of a current employee.

        Raises:
            NotFoundError: No non-terminated employee for the CI
            ConflictError: Username taken or the CI already has an account
        """
        ci = sanitize_ci(ci)
        if not ci:
            raise ValidationError("CI inválido", field="ci")
        employee = await self.employees.find_active(ci)
        if employee is None:
            raise NotFoundError(f"No hay un trabajador activo con CI {ci}", identifier=ci)

        full_name = title_case(employee["fullName"])
        username = await self._ensure_username_free(username)
        await self._ensure_no_account_for(ci)
        self._check_password(password, username, full_name)

        domain = self.settings.domain
        surnames = " ".join(p for p in (employee["lastName1"], employee["lastName2"]) if p)
        attributes = {
            "cn": f"Trabajador {full_name}",
            "sAMAccountName": username,
            "userPrincipalName": f"{username}@{domain}",
            "givenName": title_case(employee["firstName"]),
            "sn": title_case(surnames),
            "displayName": full_name,
            "mail": f"{username}@{domain}",
            "employeeID": ci,
            "l": employee["city"],
            "title": "Trabajador",
            "employeeType": "Trabajador",
            "department": employee["department"],
            "description": f"Trabajador de {employee['department']}",
        }
        dn = await self._create_user(
            self.settings.absolute(self.settings.employees_ou),
            username,
            password,
            attributes,
            self.settings.employee_groups,
        )
        return {
            "success": True,
            "message": "Cuenta de trabajador creada correctamente",
            "sAMAccountName": username,
            "userPrincipalName": f"{username}@{domain}",
            "dn": dn,
        }

    async def remove_account(self, identifier: str) -> dict[str, Any]:
        """
        Delete the account matching a CI or sAMAccountName.

        Raises:
            NotFoundError: No match
            ConflictError: More than one match
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("Identificador requerido", field="identifier")
        entry = await find_unique_user(
            self.directory, filters.by_sam_or_employee_id(identifier), identifier
        )
        await self.directory.delete(entry.dn)
        sam = entry.get("sAMAccountName")
        clear_user_caches(sam or None)
        logger.info("Account removed", extra={"username": sam, "dn": entry.dn})
        return {"success": True, "message": "Cuenta eliminada correctamente", "sAMAccountName": sam}

    async def update_employee_id(self, username: str, employee_id: str) -> dict[str, Any]:
        employee_id = sanitize_ci(employee_id)
        if len(employee_id) != 11:
            raise ValidationError("El CI debe tener 11 dígitos", field="employeeID")

        holder = await self.directory.find_one(
            f"(employeeID={filters.escape(employee_id)})", attributes=["sAMAccountName"]
        )
        if holder is not None and holder.get("sAMAccountName").lower() != username.lower():
            raise ConflictError("El CI ya está asociado a otra cuenta")

        user_dn = await resolve_user_dn(self.directory, username)
        await self.directory.modify_replace(user_dn, {"employeeID": employee_id})
        clear_user_caches(username)
        return {"success": True, "message": "CI actualizado correctamente", "employeeID": employee_id}

    async def update_backup_email(self, username: str, email: str, code: str) -> dict[str, Any]:
        """
        Store the recovery address in ``company``.

        *code* is the one mailed to the new address by ``POST /email/verification``;
        it is consumed on success.
        """
        email = (email or "").strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Correo de respaldo inválido", field="email")
        if not self.codes.verify_code(email, code or ""):
            raise ValidationError("Código inválido o expirado", field="code")
        user_dn = await resolve_user_dn(self.directory, username)
        await self.directory.modify_replace(user_dn, {"company": email})
        clear_user_caches(username)
        logger.info("Backup email updated", extra={"username": username})
        return {"success": True, "message": "Correo de respaldo actualizado", "backupEmail": email}

    async def get_profile(self, username: str) -> dict[str, Any]:
        entry = await self.directory.find_one(filters.by_sam(username))
        if entry is None:
            raise NotFoundError(f"Usuario {username} no encontrado", identifier=username)
        profile = map_user(entry)
        profile["backupEmail"] = entry.get("company") or None
        return profile
