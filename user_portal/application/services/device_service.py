"""
Device registration service.

Users register the network devices they bring to campus; MAC addresses
are unique across all owners.

Dependencies: user_portal.boundary.db.CRUD, user_portal.boundary.mac_vendor
System role: Device inventory use cases
"""

import logging
import re
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.CRUD import device_crud
from user_portal.boundary.db.base import utcnow
from user_portal.boundary.db.models import DeviceModel, DeviceType
from user_portal.boundary.mac_vendor import lookup_manufacturer
from user_portal.core.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MAC_PATTERN = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$|^[0-9A-Fa-f]{12}$")


def normalize_mac(mac: str) -> str:
    """
    Validate and normalize to ``AA:BB:CC:DD:EE:FF``.

    Raises:
        ValidationError: Not a MAC address
    """
    mac = (mac or "").strip()
    if not MAC_PATTERN.match(mac):
        raise ValidationError("Dirección MAC inválida", field="mac")
    digits = re.sub(r"[^0-9A-Fa-f]", "", mac).upper()
    return ":".join(digits[i:i + 2] for i in range(0, 12, 2))


def parse_device_type(value: str | DeviceType) -> DeviceType:
    try:
        return DeviceType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in DeviceType)
        raise ValidationError(f"Tipo de dispositivo inválido. Use: {allowed}", field="type")


def map_device(device: DeviceModel) -> dict[str, Any]:
    return {
        "id": device.id,
        "mac": device.mac,
        "type": device.type.value,
        "name": device.name,
        "manufacturer": device.manufacturer,
        "owner": device.owner,
        "lastSeen": device.last_seen,
        "createdAt": device.created_at,
    }


class DeviceService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _owned(self, owner: str, device_id: UUID) -> DeviceModel:
        device = await device_crud.get_by_id(self.db, device_id)
        if device is None or device.owner != owner:
            raise NotFoundError("Dispositivo no encontrado", identifier=str(device_id))
        return device

    async def create(
        self,
        owner: str,
        mac: str,
        device_type: str | DeviceType,
        name: str | None = None,
    ) -> dict[str, Any]:
        """
        Register a device.

        Raises:
            ValidationError: Bad MAC or type
            ConflictError: MAC already registered
        """
        mac = normalize_mac(mac)
        kind = parse_device_type(device_type)
        if await device_crud.get_by_mac(self.db, mac) is not None:
            raise ConflictError(f"La dirección MAC {mac} ya está registrada")

        manufacturer = await lookup_manufacturer(mac)
        try:
            device = await device_crud.create(
                self.db,
                mac=mac,
                type=kind,
                name=name,
                manufacturer=manufacturer,
                owner=owner,
                last_seen=utcnow(),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"La dirección MAC {mac} ya está registrada")
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to register device", extra={"owner": owner, "error": str(e)})
            raise

        logger.info("Device registered", extra={"owner": owner, "mac": mac})
        return map_device(device)

    async def list_devices(self, owner: str) -> list[dict[str, Any]]:
        return [map_device(d) for d in await device_crud.get_by_owner(self.db, owner)]

    async def get(self, owner: str, device_id: UUID) -> dict[str, Any]:
        return map_device(await self._owned(owner, device_id))

    async def update(
        self,
        owner: str,
        device_id: UUID,
        name: str | None = None,
        device_type: str | DeviceType | None = None,
        mac: str | None = None,
    ) -> dict[str, Any]:
        device = await self._owned(owner, device_id)
        changes: dict[str, Any] = {"last_seen": utcnow()}
        if name is not None:
            changes["name"] = name
        if device_type is not None:
            changes["type"] = parse_device_type(device_type)
        if mac is not None:
            new_mac = normalize_mac(mac)
            if new_mac != device.mac:
                if await device_crud.get_by_mac(self.db, new_mac) is not None:
                    raise ConflictError(f"La dirección MAC {new_mac} ya está registrada")
                changes["mac"] = new_mac
                changes["manufacturer"] = await lookup_manufacturer(new_mac)

        try:
            device = await device_crud.apply_changes(self.db, device, changes)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("La dirección MAC ya está registrada")
        return map_device(device)

    async def delete(self, owner: str, device_id: UUID) -> dict[str, Any]:
        await self._owned(owner, device_id)
        await device_crud.delete_by_id(self.db, device_id)
        await self.db.commit()
        logger.info("Device deleted", extra={"owner": owner, "device_id": str(device_id)})
        return {"success": True, "message": "Dispositivo eliminado"}

    async def stats(self, owner: str) -> dict[str, Any]:
        by_type = await device_crud.count_by_type(self.db, owner)
        return {"total": sum(by_type.values()), "byType": by_type}

    async def manufacturer(self, mac: str) -> dict[str, str]:
        mac = normalize_mac(mac)
        return {"mac": mac, "manufacturer": await lookup_manufacturer(mac)}
