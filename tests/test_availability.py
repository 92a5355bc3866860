import asyncio
from datetime import time

import pytest

from skillswap.errors import InvalidAvailability, NotFound
from skillswap.models.availability import days_in
from skillswap.services.availability import CommonSlot

MONDAY, TUESDAY, WEDNESDAY, SUNDAY = 1, 2, 4, 64


def test_bitmask_days_start_on_monday():
    assert days_in(MONDAY | SUNDAY) == ["Monday", "Sunday"]
    assert days_in(127)[2] == "Wednesday"


def test_slot_validation_and_ownership(harness):
    async def main():
        async with harness.running() as h:
            sarah = await h.make_user("Sarah Johnson")
            michael = await h.make_user("Michael Chen")
            async with h.services() as s:
                with pytest.raises(InvalidAvailability):
                    await s.availability.create_slot(sarah, "  ", MONDAY, time(9), time(10))
                with pytest.raises(InvalidAvailability):
                    await s.availability.create_slot(sarah, "Never", 0, time(9), time(10))
                with pytest.raises(InvalidAvailability):
                    await s.availability.create_slot(sarah, "Too many", 128, time(9), time(10))
                with pytest.raises(InvalidAvailability):
                    await s.availability.create_slot(sarah, "Empty", MONDAY, time(10), time(10))
                with pytest.raises(NotFound):
                    await s.availability.create_slot(999, "Ghost", MONDAY, time(9), time(10))

                late = await s.availability.create_slot(sarah, "Late", MONDAY, time(20), time(22))
                early = await s.availability.create_slot(sarah, " Early ", MONDAY, time(7), time(8))
                weekend = await s.availability.create_slot(sarah, "Weekend", SUNDAY, time(9), time(12))
                assert early.label == "Early"
                assert [x.id for x in await s.availability.list_slots(sarah)] == [
                    early.id, late.id, weekend.id,
                ]

                with pytest.raises(NotFound):
                    await s.availability.get_slot(late.id, michael)
                with pytest.raises(NotFound):
                    await s.availability.update_slot(late.id, michael, "Mine", MONDAY, time(1), time(2))
                with pytest.raises(InvalidAvailability):
                    await s.availability.update_slot(late.id, sarah, "Late", MONDAY, time(22), time(20))

                moved = await s.availability.update_slot(
                    late.id, sarah, "Late", TUESDAY, time(19), time(23)
                )
                assert (moved.days, moved.end_time) == (["Tuesday"], time(23))

                await s.availability.delete_slot(early.id, sarah)
                with pytest.raises(NotFound):
                    await s.availability.delete_slot(early.id, sarah)
                assert len(await s.availability.list_slots(sarah)) == 2

    asyncio.run(main())


def test_common_availability_per_shared_day(harness):
    async def main():
        async with harness.running() as h:
            sarah = await h.make_user("Sarah Johnson")
            michael = await h.make_user("Michael Chen")
            async with h.services() as s:
                await s.availability.create_slot(
                    sarah, "Weeknights", MONDAY | TUESDAY | WEDNESDAY, time(18), time(21)
                )
                await s.availability.create_slot(
                    michael, "After work", WEDNESDAY | MONDAY, time(19, 30), time(22)
                )
                await s.availability.create_slot(michael, "Lunch", TUESDAY, time(12), time(13))
                # Touching windows share no time.
                await s.availability.create_slot(michael, "Early", TUESDAY, time(17), time(18))

                common = await s.availability.common_availability(sarah, michael)
                assert common == [
                    CommonSlot("Monday", time(19, 30), time(21), 90),
                    CommonSlot("Wednesday", time(19, 30), time(21), 90),
                ]
                assert await s.availability.common_availability(michael, sarah) == common
                assert await s.availability.common_availability(sarah, 999) == []

    asyncio.run(main())


def test_slots_on_a_day_and_window(harness):
    async def main():
        async with harness.running() as h:
            sarah = await h.make_user("Sarah Johnson")
            async with h.services() as s:
                morning = await s.availability.create_slot(
                    sarah, "Morning", MONDAY | WEDNESDAY, time(8), time(10)
                )
                evening = await s.availability.create_slot(
                    sarah, "Evening", MONDAY, time(18), time(20)
                )

                on_monday = await s.availability.slots_on(sarah, 1, time(9, 30), time(19))
                assert [x.id for x in on_monday] == [morning.id, evening.id]
                on_wednesday = await s.availability.slots_on(sarah, 3, time(9, 30), time(19))
                assert [x.id for x in on_wednesday] == [morning.id]
                assert await s.availability.slots_on(sarah, 2, time(0), time(23)) == []

                with pytest.raises(InvalidAvailability):
                    await s.availability.slots_on(sarah, 8, time(9), time(10))
                with pytest.raises(InvalidAvailability):
                    await s.availability.slots_on(sarah, 1, time(10), time(9))

    asyncio.run(main())
