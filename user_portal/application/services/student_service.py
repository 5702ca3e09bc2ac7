"""
Student service orchestrator.

Fetches student files from SIGENU and reshapes them into the portal's
personal / academic / family view. Results and the career catalogue are
cached.

Dependencies: user_portal.boundary.sigenu, user_portal.core.ttl_cache
System role: Student lookup use cases
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from user_portal.boundary.sigenu import SigenuClient
from user_portal.boundary.sigenu.client import SERVICE_NAME
from user_portal.core.exceptions import UpstreamServiceError, ValidationError
from user_portal.core.text import sanitize_ci
from user_portal.core.ttl_cache import career_cache, student_cache

logger = logging.getLogger(__name__)

CAREERS_KEY = "careers"
ACTIVE_STATUS = "Activo"

_MONTHS = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def format_date(value: Any) -> str:
    """'2001-03-12' or epoch millis -> '12 de marzo de 2001'."""
    if value in (None, ""):
        return "Fecha inválida"
    try:
        if isinstance(value, (int, float)):
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        else:
            parsed = datetime.fromisoformat(str(value)[:10])
    except (ValueError, OverflowError, OSError):
        return "Fecha inválida"
    return f"{parsed.day} de {_MONTHS[parsed.month - 1]} de {parsed.year}"


def clean_address(address: str) -> str:
    return re.sub(r"\s+", " ", address or "").strip()


def format_parent(parent: dict[str, Any] | None) -> str:
    parent = parent or {}
    parts = []
    if parent.get("name"):
        parts.append(parent["name"])
    if parent.get("ocupation"):
        parts.append(parent["ocupation"])
    if parent.get("level"):
        parts.append(f"({parent['level']})")
    return " - ".join(parts) if parts else "No registrado"


def normalize_career_code(code: Any) -> str:
    return re.sub(r"[^0-9]", "", str(code)).zfill(5)


def map_career(code: Any, careers: dict[str, str]) -> str:
    if not code:
        return "Carrera no especificada"
    return careers.get(normalize_career_code(code)) or f"Carrera ({code})"


def format_index(value: Any) -> str:
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return "0.00"


def transform_student(raw: dict[str, Any], careers: dict[str, str]) -> dict[str, Any]:
    """Reshape one raw SIGENU student file."""
    personal = raw.get("personalData") or {}
    docent = raw.get("docentData") or {}
    name_parts = [personal.get("name"), personal.get("middleName"), personal.get("lastName")]
    return {
        "personalData": {
            "fullName": " ".join(p for p in name_parts if p).strip(),
            "identification": personal.get("identification") or "No disponible",
            "birthDate": format_date(personal.get("birthDate")),
            "address": clean_address(personal.get("address") or ""),
            "contact": personal.get("phone") or "No registrado",
            "origin": ", ".join(p for p in (personal.get("nativeOf"), personal.get("province")) if p),
        },
        "academicData": {
            "faculty": docent.get("faculty") or "Facultad no especificada",
            "career": map_career(docent.get("career"), careers),
            "year": f"{docent.get('year') or 'N/A'}° Año",
            "status": docent.get("academicSituation") or "Estado desconocido",
            "academicIndex": format_index(docent.get("academicIndex")),
        },
        "familyData": {
            "mother": format_parent(raw.get("motherData")),
            "father": format_parent(raw.get("fatherData")),
        },
        "rawData": raw,
    }


def student_status(raw: dict[str, Any]) -> str:
    return (raw.get("docentData") or {}).get("studentStatus") or ""


def is_active_student(raw: dict[str, Any]) -> bool:
    return student_status(raw) == ACTIVE_STATUS


def is_graduated(raw: dict[str, Any]) -> bool:
    return "egresado" in student_status(raw).lower()


class StudentService:
    """SIGENU lookups with caching."""

    def __init__(self, sigenu: SigenuClient) -> None:
        self.sigenu = sigenu

    async def get_careers(self) -> dict[str, str]:
        """Career catalogue keyed by zero-padded code; empty when SIGENU fails."""
        cached = career_cache.get(CAREERS_KEY)
        if cached is not None:
            return cached
        try:
            items = await self.sigenu.get_careers()
        except UpstreamServiceError as e:
            logger.warning("Career catalogue unavailable", extra={"error": e.message})
            return {}
        careers = {
            normalize_career_code(item.get("idCarrera", "")): item.get("nombre", "")
            for item in items
            if item.get("idCarrera") is not None
        }
        career_cache.set(CAREERS_KEY, careers)
        return careers

    async def get_student(self, ci: str) -> dict[str, Any]:
        """
        Student profile for an identity card.

        Returns:
            dict: success flag and the transformed data

        Raises:
            ValidationError: CI has no digits
            UpstreamServiceError: SIGENU failed or returned no record
        """
        ci = sanitize_ci(ci)
        if not ci:
            raise ValidationError("CI inválido", field="ci")

        data = await self._load(ci)
        if data is None:
            raise UpstreamServiceError(
                "[Datos principales] Estructura de datos principal inválida",
                service=SERVICE_NAME,
                details={"ci": ci},
            )
        return {"success": True, "data": data}

    async def _load(self, ci: str) -> dict[str, Any] | None:
        cached = student_cache.get(ci)
        if cached is not None:
            logger.debug("Student served from cache", extra={"ci": ci})
            return cached

        careers = await self.get_careers()
        try:
            records = await self.sigenu.get_student_all_data(ci)
        except UpstreamServiceError as e:
            if e.details.get("status_code") == 404:
                return None
            raise
        if not records:
            return None

        data = transform_student(records[0], careers)
        student_cache.set(ci, data)
        return data

    async def find(self, ci: str) -> dict[str, Any] | None:
        """Transformed student file, or None when SIGENU has no record for the CI."""
        ci = sanitize_ci(ci)
        if not ci:
            return None
        return await self._load(ci)

    async def find_raw(self, ci: str) -> dict[str, Any] | None:
        """Raw SIGENU file, or None when SIGENU has no record for the CI."""
        data = await self.find(ci)
        return data["rawData"] if data else None
