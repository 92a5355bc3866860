"""Ratings left by swap participants for each other."""

import logging
from typing import Dict, Iterable, List, Optional

from skillswap.config import settings
from skillswap.errors import DuplicateEntry, Forbidden, NotFound, RatingNotAllowed
from skillswap.models.rating import Rating
from skillswap.models.swap_request import SwapStatus
from skillswap.repositories import Store

logger = logging.getLogger(__name__)


def _check_score(score: int) -> None:
    if not 1 <= score <= 5:
        raise RatingNotAllowed("Score must be between 1 and 5.")


def _clean_comment(comment: Optional[str]) -> Optional[str]:
    return (comment or "").strip() or None


class RatingService:

    def __init__(self, store: Store, requires_completion: Optional[bool] = None):
        self.store = store
        self.requires_completion = (
            settings.RATING_REQUIRES_COMPLETION if requires_completion is None else requires_completion
        )

    async def rate(
        self, swap_id: int, rater_id: int, score: int, comment: Optional[str] = None
    ) -> Rating:
        """Rate the other participant of an accepted swap, once per rater."""
        _check_score(score)

        swap = await self.store.swaps.get(swap_id)
        if swap is None:
            raise NotFound(f"Swap request {swap_id} not found.")
        if not swap.involves(rater_id):
            raise Forbidden("Only participants can rate a swap.")
        if swap.status is not SwapStatus.ACCEPTED:
            raise RatingNotAllowed("Only accepted swaps can be rated.")
        if self.requires_completion and swap.completed_at is None:
            raise RatingNotAllowed("Swap must be completed before it can be rated.")
        if await self.store.ratings.find(swap_id, rater_id) is not None:
            raise RatingNotAllowed("You have already rated this swap.")

        try:
            rating = await self.store.ratings.add(
                Rating(
                    user_id=swap.counterpart_of(rater_id),
                    rated_by_id=rater_id,
                    swap_id=swap_id,
                    score=score,
                    comment=_clean_comment(comment),
                )
            )
        except DuplicateEntry:
            raise RatingNotAllowed("You have already rated this swap.")
        await self.store.commit()
        logger.info("User %s rated user %s %d/5 for swap %s", rater_id, rating.user_id, score, swap_id)
        return rating

    async def _own_rating(self, rating_id: int, user_id: int, action: str) -> Rating:
        rating = await self.store.ratings.get(rating_id)
        if rating is None:
            raise NotFound(f"Rating {rating_id} not found.")
        if rating.rated_by_id != user_id:
            raise Forbidden(f"Only the rater can {action} this rating.")
        return rating

    async def update_rating(
        self, rating_id: int, user_id: int, score: int, comment: Optional[str] = None
    ) -> Rating:
        _check_score(score)
        rating = await self._own_rating(rating_id, user_id, "update")
        rating.score = score
        rating.comment = _clean_comment(comment)
        await self.store.ratings.save(rating)
        await self.store.commit()
        return rating

    async def delete_rating(self, rating_id: int, user_id: int) -> None:
        rating = await self._own_rating(rating_id, user_id, "delete")
        await self.store.ratings.delete(rating)
        await self.store.commit()
        logger.info("Rating %s deleted by user %s", rating_id, user_id)

    # ── Queries ──

    async def ratings_for_user(self, user_id: int, limit: int = 50) -> List[Rating]:
        return await self.store.ratings.list_for_user(user_id, limit)

    async def ratings_for_swap(self, swap_id: int) -> List[Rating]:
        if await self.store.swaps.get(swap_id) is None:
            raise NotFound(f"Swap request {swap_id} not found.")
        return await self.store.ratings.list_for_swap(swap_id)

    async def average_ratings(self, user_ids: Iterable[int]) -> Dict[int, float]:
        return await self.store.ratings.averages(user_ids)

    async def rating_stats(self, user_id: int) -> dict:
        histogram = await self.store.ratings.score_histogram(user_id)
        total = sum(histogram.values())
        average = (
            round(sum(score * count for score, count in histogram.items()) / total, 2)
            if total else None
        )
        return {
            "user_id": user_id,
            "total_ratings": total,
            "average_rating": average,
            "histogram": {score: histogram.get(score, 0) for score in range(5, 0, -1)},
        }
