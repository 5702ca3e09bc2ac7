"""
Device ORM model.

Network devices registered by users for Wi-Fi access.

Dependencies: sqlalchemy, user_portal.boundary.db.base
System role: Device inventory persistence
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from user_portal.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class DeviceType(str, enum.Enum):
    """Kinds of device a user can register."""

    PC = "PC"
    LAPTOP = "Laptop"
    PHONE = "Celular"
    TABLET = "Tablet"
    OTHER = "Otro"


class DeviceModel(Base, UUIDMixin, TimestampMixin):
    """
    Registered device.

    Attributes:
        mac: Hardware address, normalized to upper case with colons (unique)
        type: DeviceType
        name: User-chosen label
        manufacturer: Vendor resolved from the MAC prefix
        owner: sAMAccountName of the owner
        last_seen: Last time the device was reported or edited
    """

    __tablename__ = "devices"

    mac: Mapped[str] = mapped_column(String(17), nullable=False, unique=True, index=True)
    type: Mapped[DeviceType] = mapped_column(
        Enum(DeviceType, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=DeviceType.OTHER,
    )
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    manufacturer: Mapped[str] = mapped_column(String(255), nullable=False, default="Desconocido")
    owner: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
