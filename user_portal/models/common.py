"""
Common response models.

Generic message and error schemas shared by every router.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Outcome of a command endpoint."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error body produced by HTTPException."""

    detail: str = Field(description="Error message")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    checks: dict[str, Any] = Field(default_factory=dict)
