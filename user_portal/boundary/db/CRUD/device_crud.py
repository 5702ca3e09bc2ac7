"""
Device CRUD operations.

Dependencies: sqlalchemy, user_portal.boundary.db.models
System role: Device inventory persistence operations
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.boundary.db.CRUD.base_crud import BaseCRUD
from user_portal.boundary.db.models.device_model import DeviceModel


class DeviceCRUD(BaseCRUD[DeviceModel]):
    """CRUD operations for DeviceModel."""

    def __init__(self) -> None:
        super().__init__(DeviceModel)

    async def get_by_mac(self, session: AsyncSession, mac: str) -> DeviceModel | None:
        stmt = select(DeviceModel).where(DeviceModel.mac == mac)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_owner(self, session: AsyncSession, owner: str) -> Sequence[DeviceModel]:
        stmt = (
            select(DeviceModel)
            .where(DeviceModel.owner == owner)
            .order_by(DeviceModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_type(self, session: AsyncSession, owner: str) -> dict[str, int]:
        stmt = (
            select(DeviceModel.type, func.count())
            .where(DeviceModel.owner == owner)
            .group_by(DeviceModel.type)
        )
        result = await session.execute(stmt)
        return {device_type.value: int(total) for device_type, total in result.all()}


device_crud = DeviceCRUD()
