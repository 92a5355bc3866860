import asyncio

import pytest

from skillswap.errors import (
    DuplicateSwapRequest,
    Forbidden,
    InvalidParticipants,
    InvalidTransition,
    NotFound,
    SkillNotOffered,
    UnknownSkill,
)
from skillswap.models.notification import NotificationType
from skillswap.models.swap_request import SwapStatus
from skillswap.services.swaps import SwapRole


async def _pair(h):
    """Sarah offers JavaScript and wants Graphic Design; Michael offers Graphic Design."""
    sarah = await h.make_user("Sarah Johnson", offers=["JavaScript"], wants=["Graphic Design"])
    michael = await h.make_user("Michael Chen", offers=["Graphic Design"], wants=["JavaScript"])
    return sarah, michael


async def _create(h, requester, responder, offered="JavaScript", wanted="Graphic Design"):
    async with h.services() as s:
        swap = await s.swaps.create(requester, responder, h.skill(offered), h.skill(wanted))
        return swap.id


def test_create_and_accept_scenario(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)

            async with h.services() as s:
                swap = await s.swaps.create(
                    sarah, michael, h.skill("JavaScript"), h.skill("Graphic Design")
                )
                assert swap.status is SwapStatus.PENDING
                assert swap.offered_skill.name == "JavaScript"
                assert swap.wanted_skill.name == "Graphic Design"

                inbox = await s.notifications.list_for_user(michael)
                assert len(inbox) == 1
                assert inbox[0].type is NotificationType.SWAP_REQUEST
                assert inbox[0].is_read is False
                assert "Sarah Johnson" in inbox[0].content
                assert "JavaScript" in inbox[0].content
                assert await s.messaging.channel_exists(sarah, michael) is False

            async with h.services() as s:
                accepted = await s.swaps.accept(swap.id, michael)
                assert accepted.status is SwapStatus.ACCEPTED

                inbox = await s.notifications.list_for_user(sarah)
                assert [n.type for n in inbox] == [NotificationType.SWAP_ACCEPTED]
                assert "Michael Chen" in inbox[0].content
                assert await s.messaging.channel_exists(sarah, michael)
                assert await s.messaging.channel_exists(michael, sarah)

            async with h.services() as s:
                with pytest.raises(InvalidTransition):
                    await s.swaps.accept(swap.id, michael)
                # No second acceptance notification.
                assert await s.notifications.unread_count(sarah) == 1

    asyncio.run(main())


def test_create_with_self_persists_nothing(harness):
    async def main():
        async with harness.running() as h:
            sarah, _ = await _pair(h)
            async with h.services() as s:
                with pytest.raises(InvalidParticipants):
                    await s.swaps.create(
                        sarah, sarah, h.skill("JavaScript"), h.skill("Graphic Design")
                    )
            async with h.services() as s:
                assert await s.swaps.list_for_user(sarah) == []
                assert await s.notifications.list_for_user(sarah) == []

    asyncio.run(main())


def test_create_validates_skills(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            async with h.services() as s:
                with pytest.raises(UnknownSkill):
                    await s.swaps.create(sarah, michael, 999, h.skill("Graphic Design"))
                # Sarah does not offer Cooking.
                with pytest.raises(SkillNotOffered):
                    await s.swaps.create(sarah, michael, h.skill("Cooking"), h.skill("Graphic Design"))
                # Michael does not offer Python.
                with pytest.raises(SkillNotOffered):
                    await s.swaps.create(sarah, michael, h.skill("JavaScript"), h.skill("Python"))
                with pytest.raises(NotFound):
                    await s.swaps.create(sarah, 999, h.skill("JavaScript"), h.skill("Graphic Design"))
                assert await s.notifications.list_for_user(michael) == []

    asyncio.run(main())


def test_self_swap_is_reported_before_unknown_skill(harness):
    async def main():
        async with harness.running() as h:
            sarah, _ = await _pair(h)
            async with h.services() as s:
                with pytest.raises(InvalidParticipants):
                    await s.swaps.create(sarah, sarah, 999, 998)

    asyncio.run(main())


def test_duplicate_pending_request_is_refused(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            swap_id = await _create(h, sarah, michael)
            async with h.services() as s:
                with pytest.raises(DuplicateSwapRequest):
                    await s.swaps.create(
                        sarah, michael, h.skill("JavaScript"), h.skill("Graphic Design")
                    )
            async with h.services() as s:
                await s.swaps.cancel(swap_id, sarah)
            # Once the first one is settled the same request may be made again.
            assert await _create(h, sarah, michael) != swap_id

    asyncio.run(main())


def test_only_the_right_participant_may_transition(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            outsider = await h.make_user("Emily Rodriguez")
            swap_id = await _create(h, sarah, michael)

            async with h.services() as s:
                with pytest.raises(Forbidden):
                    await s.swaps.accept(swap_id, sarah)
                with pytest.raises(Forbidden):
                    await s.swaps.reject(swap_id, outsider)
                with pytest.raises(Forbidden):
                    await s.swaps.cancel(swap_id, michael)
                with pytest.raises(NotFound):
                    await s.swaps.accept(swap_id + 100, michael)

            async with h.services() as s:
                swap = await s.store.swaps.get(swap_id)
                assert swap.status is SwapStatus.PENDING

    asyncio.run(main())


def test_terminal_states_are_final(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            rejected = await _create(h, sarah, michael)
            async with h.services() as s:
                swap = await s.swaps.reject(rejected, michael)
                assert swap.status is SwapStatus.REJECTED
                assert [n.type for n in await s.notifications.list_for_user(sarah)] == [
                    NotificationType.SWAP_REJECTED
                ]

            cancelled = await _create(h, sarah, michael)
            async with h.services() as s:
                swap = await s.swaps.cancel(cancelled, sarah)
                assert swap.status is SwapStatus.CANCELLED
                # Cancelling is silent by default.
                assert await s.notifications.unread_count(michael) == 2

            async with h.services() as s:
                for swap_id in (rejected, cancelled):
                    with pytest.raises(InvalidTransition):
                        await s.swaps.accept(swap_id, michael)
                    with pytest.raises(InvalidTransition):
                        await s.swaps.reject(swap_id, michael)
                    with pytest.raises(InvalidTransition):
                        await s.swaps.cancel(swap_id, sarah)

    asyncio.run(main())


def test_cancel_options(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            swap_id = await _create(h, sarah, michael)
            async with h.services(notify_on_cancel=True, soft_delete_on_cancel=True) as s:
                swap = await s.swaps.cancel(swap_id, sarah)
                assert swap.deleted_at is not None
                types = [n.type for n in await s.notifications.list_for_user(michael)]
                assert NotificationType.SWAP_CANCELLED in types
                # Soft-deleted requests drop out of listings.
                assert await s.swaps.list_for_user(sarah) == []

    asyncio.run(main())


def test_concurrent_accept_and_cancel_have_one_winner(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            swap_id = await _create(h, sarah, michael)

            async with h.services() as a, h.services() as b:
                results = await asyncio.gather(
                    a.swaps.accept(swap_id, michael),
                    b.swaps.cancel(swap_id, sarah),
                    return_exceptions=True,
                )

            failures = [r for r in results if isinstance(r, Exception)]
            assert len(failures) == 1
            assert isinstance(failures[0], InvalidTransition)

            async with h.services() as s:
                final = (await s.store.swaps.get(swap_id)).status
                assert final in (SwapStatus.ACCEPTED, SwapStatus.CANCELLED)
                accepted_notes = [
                    n for n in await s.notifications.list_for_user(sarah)
                    if n.type is NotificationType.SWAP_ACCEPTED
                ]
                assert len(accepted_notes) == (1 if final is SwapStatus.ACCEPTED else 0)
            assert len(h.locks) == 0

    asyncio.run(main())


def test_status_write_is_compare_and_swap(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            swap_id = await _create(h, sarah, michael)

            async with h.services() as a, h.services() as b:
                # Both sessions have seen the request while it was pending.
                assert (await a.store.swaps.get(swap_id)).status is SwapStatus.PENDING
                assert (await b.store.swaps.get(swap_id)).status is SwapStatus.PENDING

                assert await a.store.swaps.transition(swap_id, SwapStatus.PENDING, SwapStatus.ACCEPTED)
                await a.store.commit()
                assert not await b.store.swaps.transition(swap_id, SwapStatus.PENDING, SwapStatus.CANCELLED)
                await b.store.commit()

            async with h.services() as s:
                assert (await s.store.swaps.get(swap_id)).status is SwapStatus.ACCEPTED

    asyncio.run(main())


def test_complete_and_queries(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael = await _pair(h)
            outsider = await h.make_user("Emily Rodriguez")
            first = await _create(h, sarah, michael)
            second = await _create(h, michael, sarah, offered="Graphic Design", wanted="JavaScript")

            async with h.services() as s:
                with pytest.raises(InvalidTransition):
                    await s.swaps.complete(first, sarah)
                await s.swaps.accept(first, michael)

            async with h.services() as s:
                with pytest.raises(Forbidden):
                    await s.swaps.complete(first, outsider)
                swap = await s.swaps.complete(first, sarah)
                assert swap.status is SwapStatus.ACCEPTED
                assert swap.completed_at is not None
                with pytest.raises(InvalidTransition):
                    await s.swaps.complete(first, michael)

            async with h.services() as s:
                viewer = await s.users.get_user(outsider)
                with pytest.raises(Forbidden):
                    await s.swaps.get(first, viewer)

                sent = await s.swaps.list_for_user(sarah, direction=SwapRole.REQUESTER)
                received = await s.swaps.list_for_user(sarah, direction=SwapRole.RESPONDER)
                assert [x.id for x in sent] == [first]
                assert [x.id for x in received] == [second]
                # Newest first.
                assert [x.id for x in await s.swaps.list_for_user(sarah)] == [second, first]
                pending = await s.swaps.list_for_user(sarah, status=SwapStatus.PENDING)
                assert [x.id for x in pending] == [second]

                overview = await s.swaps.overview(michael)
                assert [x.id for x in overview["sent"]] == [second]
                assert [x.id for x in overview["received"]] == [first]
                assert [x.id for x in await s.swaps.history(sarah)] == [first]

    asyncio.run(main())
