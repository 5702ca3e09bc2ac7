"""
Device domain models and schemas.

Request/response schemas for device registration.

Dependencies: pydantic
System role: Device API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CreateDeviceRequest(BaseModel):
    """Request schema for registering a device."""

    mac: str = Field(..., description="MAC address, with or without separators")
    type: str = Field(..., description="PC, Laptop, Celular, Tablet or Otro")
    name: str | None = Field(None, max_length=100)


class UpdateDeviceRequest(BaseModel):
    """Request schema for editing a device."""

    mac: str | None = None
    type: str | None = None
    name: str | None = Field(None, max_length=100)


class DeviceResponse(BaseModel):
    """Response schema for device operations."""

    id: uuid.UUID
    mac: str
    type: str
    name: str | None
    manufacturer: str
    owner: str
    lastSeen: datetime
    createdAt: datetime


class DeviceStatsResponse(BaseModel):
    total: int
    byType: dict[str, int]
