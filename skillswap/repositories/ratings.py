"""Rating repository and per-user aggregates."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import DuplicateEntry
from skillswap.models.rating import Rating


class RatingRepository(ABC):

    @abstractmethod
    async def add(self, rating: Rating) -> Rating:
        """Raises ``DuplicateEntry`` when the rater already rated this swap."""
        pass

    @abstractmethod
    async def find(self, swap_id: int, rated_by_id: int) -> Optional[Rating]:
        pass

    @abstractmethod
    async def get(self, rating_id: int) -> Optional[Rating]:
        pass

    @abstractmethod
    async def save(self, rating: Rating) -> Rating:
        pass

    @abstractmethod
    async def delete(self, rating: Rating) -> None:
        pass

    @abstractmethod
    async def list_for_swap(self, swap_id: int) -> List[Rating]:
        """Both participants' ratings of one swap, newest first."""
        pass

    @abstractmethod
    async def totals(self) -> Tuple[int, Optional[float]]:
        """Platform-wide rating count and average score."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: int, limit: int = 50) -> List[Rating]:
        """Ratings received by ``user_id``, newest first."""
        pass

    @abstractmethod
    async def score_histogram(self, user_id: int) -> Dict[int, int]:
        """Map of score → count for ratings received by ``user_id``."""
        pass

    @abstractmethod
    async def averages(self, user_ids: Iterable[int]) -> Dict[int, float]:
        """Average received score per user; users without ratings are omitted."""
        pass


class SQLAlchemyRatingRepository(RatingRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, rating: Rating) -> Rating:
        try:
            async with self.session.begin_nested():
                self.session.add(rating)
        except IntegrityError as exc:
            raise DuplicateEntry(f"swap {rating.swap_id} already rated by {rating.rated_by_id}") from exc
        return rating

    async def find(self, swap_id: int, rated_by_id: int) -> Optional[Rating]:
        result = await self.session.execute(
            select(Rating).where(Rating.swap_id == swap_id, Rating.rated_by_id == rated_by_id)
        )
        return result.scalar_one_or_none()

    async def get(self, rating_id: int) -> Optional[Rating]:
        return await self.session.get(Rating, rating_id)

    async def save(self, rating: Rating) -> Rating:
        await self.session.flush()
        return rating

    async def delete(self, rating: Rating) -> None:
        await self.session.delete(rating)
        await self.session.flush()

    async def list_for_swap(self, swap_id: int) -> List[Rating]:
        result = await self.session.execute(
            select(Rating)
            .where(Rating.swap_id == swap_id)
            .order_by(desc(Rating.created_at), desc(Rating.id))
        )
        return list(result.scalars().all())

    async def totals(self) -> Tuple[int, Optional[float]]:
        result = await self.session.execute(select(func.count(Rating.id), func.avg(Rating.score)))
        count, average = result.one()
        return count, (round(float(average), 2) if average is not None else None)

    async def list_for_user(self, user_id: int, limit: int = 50) -> List[Rating]:
        result = await self.session.execute(
            select(Rating)
            .where(Rating.user_id == user_id)
            .order_by(desc(Rating.created_at), desc(Rating.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def score_histogram(self, user_id: int) -> Dict[int, int]:
        result = await self.session.execute(
            select(Rating.score, func.count(Rating.id))
            .where(Rating.user_id == user_id)
            .group_by(Rating.score)
        )
        return {score: count for score, count in result.all()}

    async def averages(self, user_ids: Iterable[int]) -> Dict[int, float]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(Rating.user_id, func.avg(Rating.score))
            .where(Rating.user_id.in_(ids))
            .group_by(Rating.user_id)
        )
        return {uid: round(float(avg), 2) for uid, avg in result.all()}
