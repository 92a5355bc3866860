import asyncio

import pytest

from skillswap.errors import Forbidden, InvalidTransition, NotFound
from skillswap.models.notification import NotificationType
from skillswap.models.swap_request import SwapStatus
from skillswap.models.user import UserRole


async def _cast(h):
    admin = await h.make_user("Ada Admin", role=UserRole.ADMIN)
    sarah = await h.make_user("Sarah Johnson", offers=["JavaScript"])
    michael = await h.make_user("Michael Chen", offers=["Graphic Design"])
    return admin, sarah, michael


def test_only_unbanned_admins_moderate(harness):
    async def main():
        async with harness.running() as h:
            admin, sarah, michael = await _cast(h)
            async with h.services() as s:
                with pytest.raises(Forbidden):
                    await s.admin.ban_user(sarah, michael)
                with pytest.raises(Forbidden):
                    await s.admin.platform_stats(sarah)

                other = await s.admin.promote(admin, michael)
                assert other.role is UserRole.ADMIN
                # A banned admin loses every moderation right, even before demotion.
                other.is_banned = True
                await s.store.commit()
                with pytest.raises(Forbidden):
                    await s.admin.list_users(michael)

    asyncio.run(main())


def test_ban_delete_and_role_rules(harness):
    async def main():
        async with harness.running() as h:
            admin, sarah, michael = await _cast(h)
            async with h.services() as s:
                assert (await s.admin.ban_user(admin, sarah)).is_banned is True
                with pytest.raises(Forbidden):
                    await s.admin.ban_user(admin, admin)
                with pytest.raises(NotFound):
                    await s.admin.ban_user(admin, 999)

                banned, total = await s.admin.list_users(admin, is_banned=True)
                assert ([u.id for u in banned], total) == ([sarah], 1)
                assert (await s.admin.unban_user(admin, sarah)).is_banned is False

                found, total = await s.admin.list_users(admin, search="CHEN")
                assert ([u.id for u in found], total) == ([michael], 1)
                admins, _ = await s.admin.list_users(admin, role=UserRole.ADMIN)
                assert [u.id for u in admins] == [admin]
                page, total = await s.admin.list_users(admin, limit=1)
                assert len(page) == 1 and total == 3
                # Newest first.
                assert page[0].id == michael

                with pytest.raises(Forbidden):
                    await s.admin.demote(admin, admin)
                await s.admin.promote(admin, sarah)
                with pytest.raises(Forbidden):
                    await s.admin.delete_user(admin, sarah)
                await s.admin.demote(admin, sarah)

                await s.admin.delete_user(admin, michael)
                with pytest.raises(NotFound):
                    await s.users.get_user(michael)

    asyncio.run(main())


def test_moderated_cancel_notifies_both_sides(harness):
    async def main():
        async with harness.running() as h:
            admin, sarah, michael = await _cast(h)
            async with h.services() as s:
                swap = await s.swaps.create(
                    sarah, michael, h.skill("JavaScript"), h.skill("Graphic Design")
                )

            async with h.services() as s:
                cancelled = await s.admin.cancel_swap(admin, swap.id, "  Reported as spam ")
                assert cancelled.status is SwapStatus.CANCELLED
                assert cancelled.cancel_reason == "Reported as spam"
                with pytest.raises(InvalidTransition):
                    await s.admin.cancel_swap(admin, swap.id, "again")
                with pytest.raises(NotFound):
                    await s.admin.cancel_swap(admin, swap.id + 100, "missing")

            async with h.services() as s:
                for user_id in (sarah, michael):
                    latest = (await s.notifications.list_for_user(user_id))[0]
                    assert latest.type is NotificationType.SWAP_CANCELLED
                    assert latest.content.endswith(": Reported as spam")

                swaps, total = await s.admin.list_swaps(admin, status=SwapStatus.CANCELLED)
                assert ([x.id for x in swaps], total) == ([swap.id], 1)
                assert (await s.admin.list_swaps(admin, requester_id=michael))[1] == 0

    asyncio.run(main())


def test_platform_stats(harness):
    async def main():
        async with harness.running() as h:
            admin, sarah, michael = await _cast(h)
            emily = await h.make_user("Emily Rodriguez", offers=["Cooking"])
            async with h.services() as s:
                first = await s.swaps.create(
                    sarah, michael, h.skill("JavaScript"), h.skill("Graphic Design")
                )
                await s.swaps.create(sarah, emily, h.skill("JavaScript"), h.skill("Cooking"))
                await s.swaps.accept(first.id, michael)
                await s.ratings.rate(first.id, sarah, 5)
                await s.ratings.rate(first.id, michael, 4)

            async with h.services() as s:
                stats = await s.admin.platform_stats(admin)
                assert stats == {
                    "total_users": 4,
                    "active_users": 3,
                    "total_swaps": 2,
                    "accepted_swaps": 1,
                    "pending_swaps": 1,
                    "total_skills": 10,
                    "total_ratings": 2,
                    "average_rating": 4.5,
                    "new_users_this_month": 4,
                    "swaps_this_month": 2,
                }

    asyncio.run(main())
