"""
Email recovery models and schemas.

Dependencies: pydantic
System role: Email recovery API contracts
"""

from pydantic import BaseModel, Field


class ForgotPasswordRequest(BaseModel):
    """Identifier is checked by the service so a blank value maps to 400."""

    identifier: str | None = None


class EmailResetPasswordRequest(BaseModel):
    email: str = Field(..., min_length=3)
    code: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)


class SendVerificationRequest(BaseModel):
    email: str = Field(..., min_length=3)
    userName: str = "Usuario"


class VerifyCodeRequest(BaseModel):
    email: str = Field(..., min_length=3)
    code: str = Field(..., min_length=1)


class SendAlertsRequest(BaseModel):
    thresholds: list[int] | None = Field(None, description="Days-left values to alert on")
