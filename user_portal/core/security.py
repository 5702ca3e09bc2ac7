"""
JWT issuing and bearer-token authentication.

Access and refresh tokens are HS256 JWTs signed with separate secrets.
The ``get_current_user`` dependency guards token-protected routes.

Dependencies: python-jose, fastapi, user_portal.configs
System role: API authentication
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from user_portal.configs import get_settings

TokenKind = Literal["access", "refresh"]

# auto_error=False so missing and malformed headers get our own messages
bearer_scheme = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """Identity carried by an access token."""

    sAMAccountName: str
    username: str


def _secret_for(kind: TokenKind) -> str:
    security = get_settings().security
    return security.jwt_secret if kind == "access" else security.jwt_refresh_secret


def _create_token(data: dict[str, Any], kind: TokenKind, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta, "type": kind})
    return jwt.encode(to_encode, _secret_for(kind), algorithm=get_settings().security.jwt_algorithm)


def create_access_token(data: dict[str, Any]) -> str:
    """Create JWT access token"""
    minutes = get_settings().security.access_token_minutes
    return _create_token(data, "access", timedelta(minutes=minutes))


def create_refresh_token(data: dict[str, Any]) -> str:
    """Create JWT refresh token"""
    days = get_settings().security.refresh_token_days
    return _create_token(data, "refresh", timedelta(days=days))


def decode_token(token: str, kind: TokenKind = "access") -> dict[str, Any]:
    """
    Decode and validate a token of the given kind.

    Raises:
        HTTPException(401): Expired, tampered or wrong-kind token
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(kind),
            algorithms=[get_settings().security.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != kind:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Tipo de token inválido",
        )
    return payload


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenUser:
    """Resolve the caller from the ``Authorization: Bearer`` header."""
    if credentials is None:
        if not request.headers.get("Authorization"):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token no proporcionado",
                headers={"WWW-Authenticate": "Bearer"},
            )
        # HTTPBearer yields None for any non-Bearer scheme
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Formato de token inválido. Use: Bearer <token>",
        )

    payload = decode_token(credentials.credentials, "access")
    sam = payload.get("sAMAccountName") or payload.get("username")
    if not sam:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido",
        )
    return TokenUser(sAMAccountName=sam, username=payload.get("username", sam))
