"""
Credential security models and schemas.

Request schemas for password changes, 2FA, TOTP recovery and PINs.

Dependencies: pydantic
System role: Credential API contracts
"""

from pydantic import BaseModel, Field


class ChangePasswordRequest(BaseModel):
    """Request schema for a self-service password change."""

    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)


class ActivateTwoFactorRequest(BaseModel):
    """Request schema for 2FA activation. Both fields are checked by the router."""

    sAMAccountName: str | None = None
    secret: str | None = None


class TwoFactorStatusResponse(BaseModel):
    enabled: bool
    hasSecret: bool
    sAMAccountName: str


class GeneratedSecretResponse(BaseModel):
    secret: str
    backupCodes: list[str]
    otpauthUrl: str


class IdentifierRequest(BaseModel):
    """Username, email, UPN or CI."""

    identifier: str = Field(..., min_length=1, max_length=255)


class VerifyTOTPRequest(IdentifierRequest):
    code: str = Field(..., description="Six digit authenticator code")


class TOTPResetPasswordRequest(VerifyTOTPRequest):
    newPassword: str = Field(..., min_length=1)


class SavePinRequest(BaseModel):
    pin: str


class VerifyPinRequest(IdentifierRequest):
    pin: str


class PinResetPasswordRequest(VerifyPinRequest):
    newPassword: str = Field(..., min_length=1)
