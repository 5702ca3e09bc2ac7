"""
Test suite for the SIGENU REST client.

The HTTP layer is replaced by httpx.MockTransport so no network is used.

System role: Verification of SIGENU response handling and error mapping
"""

import httpx
import pytest

from user_portal.boundary.sigenu.client import SigenuClient
from user_portal.configs.sigenu import SigenuSettings
from user_portal.core.exceptions import UpstreamServiceError

CI = "01020312345"


def make_client(handler) -> SigenuClient:
    settings = SigenuSettings(api_url="http://sigenu.test/rest", api_user="u", api_password="p")
    return SigenuClient(settings, transport=httpx.MockTransport(handler))


class TestGetStudentAllData:

    @pytest.mark.asyncio
    async def test_returns_student_records(self) -> None:
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[{"personalData": {"identification": CI}}])

        client = make_client(handler)

        # Act
        records = await client.get_student_all_data(CI)

        # Assert
        assert records == [{"personalData": {"identification": CI}}]
        assert seen["path"] == f"/rest/student/fileStudent/getStudentAllData/{CI}"
        assert seen["auth"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_http_error_carries_status_code(self) -> None:
        client = make_client(lambda request: httpx.Response(404))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client.get_student_all_data(CI)

        assert exc_info.value.details["status_code"] == 404
        assert exc_info.value.status_code == 502
        assert exc_info.value.message.startswith("[Datos principales] Error 404")

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client.get_student_all_data(CI)

        assert exc_info.value.unavailable is True
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client.get_student_all_data(CI)

        assert exc_info.value.status_code == 503
        assert "timeout" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_list_payload_is_rejected(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(UpstreamServiceError):
            await client.get_student_all_data(CI)

    @pytest.mark.asyncio
    async def test_invalid_json_is_rejected(self) -> None:
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client.get_student_all_data(CI)

        assert "JSON" in exc_info.value.message


class TestGetCareers:

    @pytest.mark.asyncio
    async def test_unwraps_data_envelope(self) -> None:
        careers = [{"idCarrera": "1", "nombre": "Ingeniería Informática"}]
        client = make_client(lambda request: httpx.Response(200, json={"data": careers}))

        assert await client.get_careers() == careers

    @pytest.mark.asyncio
    async def test_accepts_bare_list(self) -> None:
        careers = [{"idCarrera": "2", "nombre": "Medicina"}]
        client = make_client(lambda request: httpx.Response(200, json=careers))

        assert await client.get_careers() == careers
