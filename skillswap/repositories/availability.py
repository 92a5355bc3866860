"""Availability slot repository."""

from abc import ABC, abstractmethod
from datetime import time
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.models.availability import AvailabilitySlot


class AvailabilityRepository(ABC):

    @abstractmethod
    async def add(self, slot: AvailabilitySlot) -> AvailabilitySlot:
        pass

    @abstractmethod
    async def get(self, slot_id: int) -> Optional[AvailabilitySlot]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: int) -> List[AvailabilitySlot]:
        """Ordered by day bitmask, then start time."""
        pass

    @abstractmethod
    async def find_overlapping(
        self, user_id: int, day_mask: int, start: time, end: time
    ) -> List[AvailabilitySlot]:
        """Slots on any day in ``day_mask`` whose window touches ``start``-``end``."""
        pass

    @abstractmethod
    async def save(self, slot: AvailabilitySlot) -> AvailabilitySlot:
        pass

    @abstractmethod
    async def delete(self, slot: AvailabilitySlot) -> None:
        pass


class SQLAlchemyAvailabilityRepository(AvailabilityRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, slot: AvailabilitySlot) -> AvailabilitySlot:
        self.session.add(slot)
        await self.session.flush()
        return slot

    async def get(self, slot_id: int) -> Optional[AvailabilitySlot]:
        return await self.session.get(AvailabilitySlot, slot_id)

    async def list_for_user(self, user_id: int) -> List[AvailabilitySlot]:
        result = await self.session.execute(
            select(AvailabilitySlot)
            .where(AvailabilitySlot.user_id == user_id)
            .order_by(AvailabilitySlot.day_bitmask, AvailabilitySlot.start_time, AvailabilitySlot.id)
        )
        return list(result.scalars().all())

    async def find_overlapping(
        self, user_id: int, day_mask: int, start: time, end: time
    ) -> List[AvailabilitySlot]:
        result = await self.session.execute(
            select(AvailabilitySlot)
            .where(
                AvailabilitySlot.user_id == user_id,
                AvailabilitySlot.day_bitmask.op("&")(day_mask) > 0,
                AvailabilitySlot.start_time <= end,
                AvailabilitySlot.end_time >= start,
            )
            .order_by(AvailabilitySlot.start_time, AvailabilitySlot.id)
        )
        return list(result.scalars().all())

    async def save(self, slot: AvailabilitySlot) -> AvailabilitySlot:
        await self.session.flush()
        return slot

    async def delete(self, slot: AvailabilitySlot) -> None:
        await self.session.delete(slot)
        await self.session.flush()
