import asyncio

import pytest

from skillswap.errors import Forbidden, NotFound, RatingNotAllowed
from skillswap.services.ratings import RatingService


async def _swap(h):
    sarah = await h.make_user("Sarah Johnson", offers=["JavaScript"])
    michael = await h.make_user("Michael Chen", offers=["Graphic Design"])
    async with h.services() as s:
        swap = await s.swaps.create(sarah, michael, h.skill("JavaScript"), h.skill("Graphic Design"))
    return sarah, michael, swap.id


def test_only_accepted_swaps_can_be_rated(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael, swap_id = await _swap(h)
            outsider = await h.make_user("Emily Rodriguez")

            async with h.services() as s:
                with pytest.raises(RatingNotAllowed):
                    await s.ratings.rate(swap_id, sarah, 5)
                await s.swaps.accept(swap_id, michael)

            async with h.services() as s:
                with pytest.raises(NotFound):
                    await s.ratings.rate(swap_id + 100, sarah, 5)
                with pytest.raises(Forbidden):
                    await s.ratings.rate(swap_id, outsider, 5)
                with pytest.raises(RatingNotAllowed):
                    await s.ratings.rate(swap_id, sarah, 6)

                rating = await s.ratings.rate(swap_id, sarah, 4, comment="  Patient and clear ")
                assert rating.user_id == michael
                assert rating.rated_by_id == sarah
                assert rating.comment == "Patient and clear"

                with pytest.raises(RatingNotAllowed):
                    await s.ratings.rate(swap_id, sarah, 5)

                back = await s.ratings.rate(swap_id, michael, 5)
                assert back.user_id == sarah

    asyncio.run(main())


def test_rating_can_require_completion(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael, swap_id = await _swap(h)
            async with h.services() as s:
                await s.swaps.accept(swap_id, michael)

            async with h.services() as s:
                strict = RatingService(s.store, requires_completion=True)
                with pytest.raises(RatingNotAllowed):
                    await strict.rate(swap_id, sarah, 5)
                await s.swaps.complete(swap_id, michael)
                rating = await strict.rate(swap_id, sarah, 5)
                assert rating.score == 5

    asyncio.run(main())


def test_rating_stats_and_averages(harness):
    async def main():
        async with harness.running() as h:
            michael = await h.make_user("Michael Chen", offers=["Graphic Design"])
            raters = []
            for name in ("Sarah Johnson", "Emily Rodriguez", "David Kim"):
                raters.append(await h.make_user(name, offers=["JavaScript"]))

            async with h.services() as s:
                assert await s.ratings.rating_stats(michael) == {
                    "user_id": michael,
                    "total_ratings": 0,
                    "average_rating": None,
                    "histogram": {5: 0, 4: 0, 3: 0, 2: 0, 1: 0},
                }

            for rater, score in zip(raters, (5, 4, 4)):
                async with h.services() as s:
                    swap = await s.swaps.create(
                        rater, michael, h.skill("JavaScript"), h.skill("Graphic Design")
                    )
                    await s.swaps.accept(swap.id, michael)
                    await s.ratings.rate(swap.id, rater, score)

            async with h.services() as s:
                stats = await s.ratings.rating_stats(michael)
                assert stats["total_ratings"] == 3
                assert stats["average_rating"] == 4.33
                assert stats["histogram"] == {5: 1, 4: 2, 3: 0, 2: 0, 1: 0}
                assert await s.ratings.average_ratings([michael, raters[0]]) == {michael: 4.33}
                assert len(await s.ratings.ratings_for_user(michael)) == 3

    asyncio.run(main())


def test_concurrent_duplicate_rating_is_rejected(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael, swap_id = await _swap(h)
            async with h.services() as s:
                await s.swaps.accept(swap_id, michael)

            async def rate(score):
                async with h.services() as s:
                    return await s.ratings.rate(swap_id, sarah, score)

            results = await asyncio.gather(rate(4), rate(5), return_exceptions=True)
            assert sorted(type(r).__name__ for r in results) == ["Rating", "RatingNotAllowed"]
            async with h.services() as s:
                assert len(await s.ratings.ratings_for_swap(swap_id)) == 1

    asyncio.run(main())


def test_rater_can_update_and_delete(harness):
    async def main():
        async with harness.running() as h:
            sarah, michael, swap_id = await _swap(h)
            async with h.services() as s:
                await s.swaps.accept(swap_id, michael)
                rating = await s.ratings.rate(swap_id, sarah, 3, comment="ok")
                back = await s.ratings.rate(swap_id, michael, 5)

            async with h.services() as s:
                with pytest.raises(Forbidden):
                    await s.ratings.update_rating(rating.id, michael, 1)
                with pytest.raises(RatingNotAllowed):
                    await s.ratings.update_rating(rating.id, sarah, 0)
                with pytest.raises(NotFound):
                    await s.ratings.update_rating(rating.id + 100, sarah, 4)

                updated = await s.ratings.update_rating(rating.id, sarah, 5, comment="  Great  ")
                assert (updated.score, updated.comment) == (5, "Great")
                assert [r.id for r in await s.ratings.ratings_for_swap(swap_id)] == [back.id, rating.id]

            async with h.services() as s:
                with pytest.raises(Forbidden):
                    await s.ratings.delete_rating(rating.id, michael)
                await s.ratings.delete_rating(rating.id, sarah)
                assert [r.id for r in await s.ratings.ratings_for_swap(swap_id)] == [back.id]
                with pytest.raises(NotFound):
                    await s.ratings.ratings_for_swap(swap_id + 100)

                # The rating slot is free again.
                again = await s.ratings.rate(swap_id, sarah, 4)
                assert again.user_id == michael

    asyncio.run(main())
