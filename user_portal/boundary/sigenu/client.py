"""
SIGENU REST client.

Thin async wrapper over the student information system: raw student
files and the national career catalogue. Transport and HTTP failures are
turned into UpstreamServiceError with a ``[context] Error status: msg``
message.

Dependencies: httpx, user_portal.configs
System role: Student information system adapter
"""

import logging
from functools import lru_cache
from typing import Any

import httpx

from user_portal.configs import get_settings
from user_portal.configs.sigenu import SigenuSettings
from user_portal.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "SIGENU"


class SigenuClient:
    """Async SIGENU API client with basic authentication."""

    def __init__(
        self,
        settings: SigenuSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            settings: SIGENU connection settings
            transport: Optional httpx transport, used to stub the API in tests
        """
        self._settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.api_url.rstrip("/"),
            auth=(self._settings.api_user, self._settings.api_password),
            timeout=self._settings.timeout,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )

    async def _get(self, path: str, context: str) -> Any:
        try:
            async with self._client() as client:
                response = await client.get(path)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            logger.error("SIGENU request timed out", extra={"path": path})
            raise UpstreamServiceError(
                f"[{context}] Error timeout: la solicitud excedió {self._settings.timeout:g}s",
                service=SERVICE_NAME,
                unavailable=True,
            ) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                "SIGENU returned an error status",
                extra={"path": path, "status_code": status_code},
            )
            raise UpstreamServiceError(
                f"[{context}] Error {status_code}: {e.response.reason_phrase}",
                service=SERVICE_NAME,
                details={"status_code": status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error("SIGENU unreachable", extra={"path": path, "error": str(e)})
            raise UpstreamServiceError(
                f"[{context}] Error de conexión: {e}",
                service=SERVICE_NAME,
                unavailable=True,
            ) from e
        except ValueError as e:
            raise UpstreamServiceError(
                f"[{context}] Error: respuesta no es JSON válido",
                service=SERVICE_NAME,
            ) from e

    async def get_student_all_data(self, ci: str) -> list[dict[str, Any]]:
        """
        Fetch every record SIGENU holds for an identity card.

        Returns:
            list[dict]: Raw student files, usually one element
        """
        data = await self._get(
            f"/student/fileStudent/getStudentAllData/{ci}", context="Datos principales"
        )
        if not isinstance(data, list):
            raise UpstreamServiceError(
                "[Datos principales] Error: estructura de respuesta inválida",
                service=SERVICE_NAME,
            )
        return data

    async def get_careers(self) -> list[dict[str, Any]]:
        """Fetch the career catalogue, unwrapping an optional ``data`` envelope."""
        data = await self._get("/dss/getcareermodel", context="Carreras")
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]
        if not isinstance(data, list):
            raise UpstreamServiceError(
                "[Carreras] Error: estructura de respuesta inválida",
                service=SERVICE_NAME,
            )
        return data


@lru_cache
def get_sigenu_client() -> SigenuClient:
    return SigenuClient(get_settings().sigenu)
