"""
Weekly availability: recurring time windows a user can meet in.

Days are a bitmask with Monday = 1 through Sunday = 64. Two users share a
window on every day both slots cover, for as long as both windows overlap.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List

from skillswap.errors import InvalidAvailability, NotFound
from skillswap.models.availability import ALL_DAYS, WEEKDAYS, AvailabilitySlot, day_bit, days_in
from skillswap.repositories import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommonSlot:
    day: str
    start_time: time
    end_time: time
    duration_minutes: int


def _minutes_between(start: time, end: time) -> int:
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return int(delta.total_seconds() // 60)


def _validated(label: str, day_bitmask: int, start_time: time, end_time: time) -> str:
    label = (label or "").strip()
    if not label:
        raise InvalidAvailability("Label is required.")
    if not 1 <= day_bitmask <= ALL_DAYS:
        raise InvalidAvailability(f"day_bitmask must be between 1 and {ALL_DAYS}.")
    if end_time <= start_time:
        raise InvalidAvailability("end_time must be after start_time.")
    return label


class AvailabilityService:

    def __init__(self, store: Store):
        self.store = store

    async def create_slot(
        self, user_id: int, label: str, day_bitmask: int, start_time: time, end_time: time
    ) -> AvailabilitySlot:
        label = _validated(label, day_bitmask, start_time, end_time)
        if await self.store.users.get(user_id) is None:
            raise NotFound("User not found.")
        slot = await self.store.availability.add(
            AvailabilitySlot(
                user_id=user_id,
                label=label,
                day_bitmask=day_bitmask,
                start_time=start_time,
                end_time=end_time,
            )
        )
        await self.store.commit()
        logger.info("User %s added availability %s (%s)", user_id, slot.id, ", ".join(slot.days))
        return slot

    async def list_slots(self, user_id: int) -> List[AvailabilitySlot]:
        return await self.store.availability.list_for_user(user_id)

    async def get_slot(self, slot_id: int, user_id: int) -> AvailabilitySlot:
        slot = await self.store.availability.get(slot_id)
        # Slots of other users are reported as missing.
        if slot is None or slot.user_id != user_id:
            raise NotFound("Availability slot not found.")
        return slot

    async def update_slot(
        self,
        slot_id: int,
        user_id: int,
        label: str,
        day_bitmask: int,
        start_time: time,
        end_time: time,
    ) -> AvailabilitySlot:
        label = _validated(label, day_bitmask, start_time, end_time)
        slot = await self.get_slot(slot_id, user_id)
        slot.label = label
        slot.day_bitmask = day_bitmask
        slot.start_time = start_time
        slot.end_time = end_time
        await self.store.availability.save(slot)
        await self.store.commit()
        return slot

    async def delete_slot(self, slot_id: int, user_id: int) -> None:
        slot = await self.get_slot(slot_id, user_id)
        await self.store.availability.delete(slot)
        await self.store.commit()

    # ── Queries ──

    async def common_availability(self, user_id: int, other_id: int) -> List[CommonSlot]:
        """Overlapping windows of two users, one entry per shared day, Monday first."""
        mine = await self.store.availability.list_for_user(user_id)
        theirs = await self.store.availability.list_for_user(other_id)

        common = set()
        for a in mine:
            for b in theirs:
                shared_days = a.day_bitmask & b.day_bitmask
                start, end = max(a.start_time, b.start_time), min(a.end_time, b.end_time)
                if not shared_days or start >= end:
                    continue
                for day in days_in(shared_days):
                    common.add(CommonSlot(day, start, end, _minutes_between(start, end)))

        return sorted(common, key=lambda s: (WEEKDAYS.index(s.day), s.start_time, s.end_time))

    async def slots_on(
        self, user_id: int, day_of_week: int, start_time: time, end_time: time
    ) -> List[AvailabilitySlot]:
        """Slots of ``user_id`` on ``day_of_week`` (Monday = 1) touching the given window."""
        if not 1 <= day_of_week <= len(WEEKDAYS):
            raise InvalidAvailability("day_of_week must be between 1 and 7.")
        if end_time <= start_time:
            raise InvalidAvailability("end_time must be after start_time.")
        return await self.store.availability.find_overlapping(
            user_id, day_bit(day_of_week), start_time, end_time
        )
