"""
Test suite for JWT issuing and validation.

System role: Verification of access and refresh token handling
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from user_portal.core.security import (
    _create_token,
    create_access_token,
    create_refresh_token,
    decode_token,
)


class TestTokens:

    def test_access_token_round_trip(self) -> None:
        token = create_access_token({"sAMAccountName": "jperez", "username": "jperez"})

        payload = decode_token(token, "access")

        assert payload["sAMAccountName"] == "jperez"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_refresh_token_decodes_as_refresh(self) -> None:
        token = create_refresh_token({"sAMAccountName": "jperez"})

        assert decode_token(token, "refresh")["type"] == "refresh"

    def test_refresh_token_rejected_as_access(self) -> None:
        token = create_refresh_token({"sAMAccountName": "jperez"})

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token, "access")

        assert exc_info.value.status_code == 401

    def test_expired_token_rejected(self) -> None:
        token = _create_token({"sAMAccountName": "jperez"}, "access", timedelta(seconds=-5))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token, "access")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token expirado"

    def test_tampered_token_rejected(self) -> None:
        token = create_access_token({"sAMAccountName": "jperez"})

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token[:-4] + "AAAA", "access")

        assert exc_info.value.status_code == 401
