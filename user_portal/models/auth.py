"""
Authentication models and schemas.

Request/response schemas for login and token refresh.

Dependencies: pydantic
System role: Auth API contracts
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request schema for directory login."""

    username: str = Field(..., min_length=1, max_length=255, description="sAMAccountName or UPN")
    password: str = Field(..., min_length=1, description="Directory password")


class RefreshRequest(BaseModel):
    refreshToken: str = Field(..., min_length=1)


class LoginUser(BaseModel):
    """Profile returned with a successful login."""

    sAMAccountName: str
    dn: str
    username: str
    nombreCompleto: str | None = None
    email: str | None = None
    nombre: str | None = None
    apellido: str | None = None
    displayName: str | None = None
    employeeID: str | None = None


class LoginResponse(BaseModel):
    """Response schema for login."""

    accessToken: str
    refreshToken: str
    user: LoginUser


class AccessTokenResponse(BaseModel):
    accessToken: str
