"""
Test suite for 2FA, TOTP recovery and PIN endpoints.

System role: Verification of credential recovery HTTP API
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from user_portal.api.deps.dependencies import (
    get_pin_service,
    get_totp_verification_service,
    get_two_factor_service,
)
from user_portal.core.exceptions import AuthenticationError, NotFoundError, ValidationError

SECRET = "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP"


@pytest.fixture
def mock_two_factor(client: TestClient) -> MagicMock:
    service = MagicMock()
    service.activate = AsyncMock(
        return_value={"success": True, "message": "2FA activado correctamente", "sAMAccountName": "jperez"}
    )
    service.status = AsyncMock(return_value={"enabled": True, "hasSecret": True, "sAMAccountName": "jperez"})
    service.deactivate = AsyncMock(return_value={"success": True, "message": "ok", "sAMAccountName": "jperez"})
    service.generate_secret = MagicMock(
        return_value={"secret": SECRET, "backupCodes": ["A1B2C3D4"], "otpauthUrl": "otpauth://totp/x"}
    )
    client.app.dependency_overrides[get_two_factor_service] = lambda: service
    return service


class TestTwoFactorEndpoints:

    def test_activate(self, client: TestClient, mock_two_factor: MagicMock, auth_headers: dict) -> None:
        response = client.post(
            "/api/2fa/activate",
            json={"sAMAccountName": "jperez", "secret": SECRET},
            headers=auth_headers,
        )

        assert response.status_code == 200
        mock_two_factor.activate.assert_awaited_once_with("jperez", SECRET)

    @pytest.mark.parametrize(
        "payload", [{"secret": SECRET}, {"sAMAccountName": "jperez"}, {}]
    )
    def test_activate_missing_fields(
        self, client: TestClient, mock_two_factor: MagicMock, auth_headers: dict, payload: dict
    ) -> None:
        response = client.post("/api/2fa/activate", json=payload, headers=auth_headers)

        assert response.status_code == 400
        mock_two_factor.activate.assert_not_awaited()

    def test_activate_for_another_user_is_rejected(
        self, client: TestClient, mock_two_factor: MagicMock, auth_headers: dict
    ) -> None:
        response = client.post(
            "/api/2fa/activate",
            json={"sAMAccountName": "mgarcia", "secret": SECRET},
            headers=auth_headers,
        )

        assert response.status_code == 400
        mock_two_factor.activate.assert_not_awaited()

    def test_activate_requires_token(self, client: TestClient, mock_two_factor: MagicMock) -> None:
        response = client.post("/api/2fa/activate", json={"sAMAccountName": "jperez", "secret": SECRET})

        assert response.status_code == 401

    def test_status(self, client: TestClient, mock_two_factor: MagicMock) -> None:
        response = client.get("/api/2fa/status/jperez")

        assert response.status_code == 200
        assert response.json() == {"enabled": True, "hasSecret": True, "sAMAccountName": "jperez"}

    def test_status_unknown_user(self, client: TestClient, mock_two_factor: MagicMock) -> None:
        mock_two_factor.status.side_effect = NotFoundError("Usuario ghost no encontrado")

        response = client.get("/api/2fa/status/ghost")

        assert response.status_code == 404

    def test_deactivate_and_generate(
        self, client: TestClient, mock_two_factor: MagicMock, auth_headers: dict
    ) -> None:
        deactivated = client.post("/api/2fa/deactivate", headers=auth_headers)
        generated = client.get("/api/2fa/generate-secret", headers=auth_headers)

        assert deactivated.status_code == 200
        mock_two_factor.deactivate.assert_awaited_once_with("jperez")
        assert generated.json()["secret"] == SECRET


@pytest.fixture
def mock_totp(client: TestClient) -> MagicMock:
    service = MagicMock()
    service.check_user = AsyncMock(return_value={"user": {"sAMAccountName": "jperez"}, "has2FA": True})
    service.verify = AsyncMock(return_value={"valid": True, "user": {"sAMAccountName": "jperez"}})
    service.get_totp_info = AsyncMock(return_value={"hasTOTPSecret": True, "sAMAccountName": "jperez"})
    service.reset_password = AsyncMock(
        return_value={"success": True, "message": "Contraseña actualizada correctamente"}
    )
    client.app.dependency_overrides[get_totp_verification_service] = lambda: service
    return service


class TestTOTPEndpoints:

    def test_check_user(self, client: TestClient, mock_totp: MagicMock) -> None:
        response = client.post("/api/totp/check-user", json={"identifier": "jperez"})

        assert response.status_code == 200
        assert response.json()["has2FA"] is True

    def test_verify(self, client: TestClient, mock_totp: MagicMock) -> None:
        response = client.post("/api/totp/verify-totp", json={"identifier": "jperez", "code": "123456"})

        assert response.status_code == 200
        mock_totp.verify.assert_awaited_once_with("jperez", "123456")

    def test_wrong_code(self, client: TestClient, mock_totp: MagicMock) -> None:
        mock_totp.verify.side_effect = AuthenticationError("Código TOTP inválido")

        response = client.post("/api/totp/verify-totp", json={"identifier": "jperez", "code": "000000"})

        assert response.status_code == 401

    def test_empty_identifier(self, client: TestClient, mock_totp: MagicMock) -> None:
        response = client.post("/api/totp/get-totp-info", json={"identifier": ""})

        assert response.status_code == 400

    def test_reset_password(self, client: TestClient, mock_totp: MagicMock) -> None:
        response = client.post(
            "/api/totp/reset-password",
            json={"identifier": "jperez", "code": "123456", "newPassword": "Uniss#2024x"},
        )

        assert response.status_code == 200
        mock_totp.reset_password.assert_awaited_once_with("jperez", "123456", "Uniss#2024x")

    def test_reset_password_with_wrong_code(self, client: TestClient, mock_totp: MagicMock) -> None:
        mock_totp.reset_password.side_effect = AuthenticationError("Código TOTP inválido")

        response = client.post(
            "/api/totp/reset-password",
            json={"identifier": "jperez", "code": "000000", "newPassword": "Uniss#2024x"},
        )

        assert response.status_code == 401

    def test_reset_password_requires_new_password(self, client: TestClient, mock_totp: MagicMock) -> None:
        response = client.post("/api/totp/reset-password", json={"identifier": "jperez", "code": "123456"})

        assert response.status_code == 400
        mock_totp.reset_password.assert_not_awaited()


@pytest.fixture
def mock_pin(client: TestClient, make_entry) -> MagicMock:
    service = MagicMock()
    service.save = AsyncMock(return_value={"success": True, "message": "PIN guardado correctamente"})
    service.remove = AsyncMock(return_value={"success": True, "message": "PIN eliminado correctamente"})
    service.has_pin = AsyncMock(return_value=True)
    service.find_user = AsyncMock(
        return_value=make_entry(sAMAccountName="jperez", displayName="Juan Pérez", employeeID="85010112345")
    )
    service.check_user_has_pin = AsyncMock(return_value={"hasPin": False, "sAMAccountName": "jperez"})
    service.verify_for_recovery = AsyncMock(
        return_value={"userDN": "CN=Juan", "userData": {"sAMAccountName": "jperez"}}
    )
    service.reset_password_with_pin = AsyncMock(
        return_value={"success": True, "message": "Contraseña actualizada correctamente"}
    )
    client.app.dependency_overrides[get_pin_service] = lambda: service
    return service


class TestPinEndpoints:

    def test_save(self, client: TestClient, mock_pin: MagicMock, auth_headers: dict) -> None:
        response = client.post("/api/pin/save", json={"pin": "482915"}, headers=auth_headers)

        assert response.status_code == 200
        mock_pin.save.assert_awaited_once_with("jperez", "482915")

    def test_save_weak_pin(self, client: TestClient, mock_pin: MagicMock, auth_headers: dict) -> None:
        mock_pin.save.side_effect = ValidationError("El PIN no puede ser una secuencia consecutiva")

        response = client.post("/api/pin/save", json={"pin": "123456"}, headers=auth_headers)

        assert response.status_code == 400
        assert "secuencia" in response.json()["detail"]

    def test_remove_and_check(self, client: TestClient, mock_pin: MagicMock, auth_headers: dict) -> None:
        removed = client.delete("/api/pin/remove", headers=auth_headers)
        checked = client.get("/api/pin/check", headers=auth_headers)

        assert removed.status_code == 200
        assert checked.json() == {"hasPin": True, "sAMAccountName": "jperez"}

    def test_find_user_returns_summary(self, client: TestClient, mock_pin: MagicMock) -> None:
        response = client.post("/api/pin/find-user", json={"identifier": "85010112345"})

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["sAMAccountName"] == "jperez"
        assert user["accountStatus"] == "Activa"

    def test_check_user_has_pin(self, client: TestClient, mock_pin: MagicMock) -> None:
        response = client.post("/api/pin/check-user-has-pin", json={"identifier": "jperez"})

        assert response.json()["hasPin"] is False

    def test_verify_for_recovery(self, client: TestClient, mock_pin: MagicMock) -> None:
        response = client.post("/api/pin/verify-for-recovery", json={"identifier": "jperez", "pin": "482915"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["userDN"] == "CN=Juan"

    @pytest.mark.parametrize("pin", ["12345", "abcdef", "1234567"])
    def test_verify_rejects_malformed_pin(self, client: TestClient, mock_pin: MagicMock, pin: str) -> None:
        response = client.post("/api/pin/verify-for-recovery", json={"identifier": "jperez", "pin": pin})

        assert response.status_code == 400
        mock_pin.verify_for_recovery.assert_not_awaited()

    def test_reset_password_with_wrong_pin(self, client: TestClient, mock_pin: MagicMock) -> None:
        mock_pin.reset_password_with_pin.side_effect = AuthenticationError("PIN incorrecto")

        response = client.post(
            "/api/pin/reset-password",
            json={"identifier": "jperez", "pin": "000001", "newPassword": "Uniss#2024x"},
        )

        assert response.status_code == 401

    def test_reset_password(self, client: TestClient, mock_pin: MagicMock) -> None:
        response = client.post(
            "/api/pin/reset-password",
            json={"identifier": "jperez", "pin": "482915", "newPassword": "Uniss#2024x"},
        )

        assert response.status_code == 200
        mock_pin.reset_password_with_pin.assert_awaited_once_with("jperez", "482915", "Uniss#2024x")
