"""
Username suggestion service.

Builds account name candidates from a person's names and surnames and
offers the ones still free in the directory. Options already offered to
the same CI are not offered again until reset.

Dependencies: user_portal.boundary.ldap, StudentService, EmployeeService
System role: Username selection for account creation
"""

import logging
import re
from typing import Any, Literal

from user_portal.application.services.employee_service import EmployeeService
from user_portal.application.services.student_service import StudentService
from user_portal.boundary.ldap import DirectoryClient, filters
from user_portal.core.exceptions import NotFoundError, ValidationError
from user_portal.core.text import sanitize_ci, strip_accents
from user_portal.core.ttl_cache import TTLCache, offered_usernames_cache

logger = logging.getLogger(__name__)

UserType = Literal["student", "employee"]

MIN_LENGTH = 3
MAX_LENGTH = 20
_USERNAME_PATTERN = re.compile(r"^[a-z0-9]{3,20}$")


def _words(value: str | None) -> list[str]:
    clean = re.sub(r"[^a-z\s]", "", strip_accents(value or "").lower())
    return clean.split()


def build_candidates(given_names: str, surname_1: str, surname_2: str) -> list[str]:
    """
    Username candidates in preference order.

    Combines each of the first two given names with each of the first two
    surname words, then adds initial-based three part forms.
    """
    names = _words(given_names)[:2]
    surname_words = _words(surname_1)[:1] + _words(surname_2)[:2]
    first_surname = _words(surname_1)[:1]
    second_surname = _words(surname_2)[:1]

    raw: list[str] = []
    for name in names:
        for surname in surname_words:
            raw.append(f"{name[0]}{surname}")
            raw.append(f"{name}{surname[0]}")
            raw.append(f"{name}{surname}"[:8])
            if name == names[0]:
                raw.append(f"{name[0]}{surname[0]}{surname}")

    if names and first_surname and second_surname:
        n, s1, s2 = names[0], first_surname[0], second_surname[0]
        raw.append(f"{n[0]}{s1[0]}{s2[0]}")
        raw.append(f"{n}{s1[0]}{s2[0]}")
        raw.append(f"{n[0]}{s1}{s2[0]}")
        if len(names) > 1:
            raw.append(f"{names[1][0]}{s1[0]}{s2[0]}")

    candidates: list[str] = []
    for option in raw:
        option = option[:MAX_LENGTH]
        if _USERNAME_PATTERN.match(option) and option not in candidates:
            candidates.append(option)
    return candidates


class UsernameService:
    """Username availability and suggestions."""

    def __init__(
        self,
        directory: DirectoryClient,
        students: StudentService,
        employees: EmployeeService,
        offered: TTLCache = offered_usernames_cache,
    ) -> None:
        self.directory = directory
        self.students = students
        self.employees = employees
        # Options already offered per CI, shared across requests
        self.offered = offered

    async def check_available(self, username: str) -> dict[str, Any]:
        username = (username or "").strip().lower()
        if not _USERNAME_PATTERN.match(username):
            raise ValidationError(
                f"El nombre de usuario debe tener entre {MIN_LENGTH} y {MAX_LENGTH} "
                "caracteres, solo letras minúsculas y números",
                field="username",
            )
        entry = await self.directory.find_one(filters.by_sam(username), attributes=["sAMAccountName"])
        return {"username": username, "available": entry is None}

    async def _name_parts(self, user_type: UserType, ci: str) -> tuple[str, str, str]:
        if user_type == "student":
            raw = await self.students.find_raw(ci)
            if raw is None:
                raise NotFoundError(f"Estudiante con CI {ci} no encontrado", identifier=ci)
            personal = raw.get("personalData") or {}
            return (
                str(personal.get("name") or ""),
                str(personal.get("middleName") or ""),
                str(personal.get("lastName") or ""),
            )

        employee = await self.employees.find_active(ci)
        if employee is None:
            raise NotFoundError(f"Trabajador con CI {ci} no encontrado", identifier=ci)
        return employee["firstName"], employee["lastName1"], employee["lastName2"]

    async def generate_options(
        self,
        user_type: UserType,
        ci: str,
        count: int = 3,
        reset: bool = False,
    ) -> dict[str, Any]:
        """
        Up to *count* free usernames for the person behind *ci*.

        Raises:
            ValidationError: Bad user type or CI, or not enough name data
            NotFoundError: No student or employee for the CI
        """
        if user_type not in ("student", "employee"):
            raise ValidationError("Tipo de usuario inválido", field="user_type")
        ci = sanitize_ci(ci)
        if not ci:
            raise ValidationError("CI inválido", field="ci")
        if reset:
            self.reset_options(ci)

        given, surname_1, surname_2 = await self._name_parts(user_type, ci)
        if not given.strip() or not (surname_1.strip() or surname_2.strip()):
            raise ValidationError("Datos insuficientes para generar nombres de usuario")

        previously = list(self.offered.get(ci) or [])

        options: list[str] = []
        for candidate in build_candidates(given, surname_1, surname_2):
            if len(options) >= count:
                break
            if candidate in previously:
                continue
            if (await self.check_available(candidate))["available"]:
                options.append(candidate)

        self.offered.purge_expired()
        self.offered.set(ci, previously + options)

        logger.info("Generated username options", extra={"ci": ci, "count": len(options)})
        return {"ci": ci, "userType": user_type, "options": options}

    def reset_options(self, ci: str) -> None:
        self.offered.delete(sanitize_ci(ci))
