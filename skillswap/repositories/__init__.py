"""
Repository interfaces and their SQLAlchemy implementations.

Services only see :class:`Store`, so the domain logic does not depend on
which storage technology backs it.
"""

from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.repositories.availability import (
    AvailabilityRepository,
    SQLAlchemyAvailabilityRepository,
)
from skillswap.repositories.messages import MessageRepository, SQLAlchemyMessageRepository
from skillswap.repositories.notifications import (
    NotificationRepository,
    SQLAlchemyNotificationRepository,
)
from skillswap.repositories.ratings import RatingRepository, SQLAlchemyRatingRepository
from skillswap.repositories.skills import SkillRepository, SQLAlchemySkillRepository
from skillswap.repositories.swaps import SQLAlchemySwapRequestRepository, SwapRequestRepository
from skillswap.repositories.users import SQLAlchemyUserRepository, UserRepository


class Store(ABC):
    """One transactional unit of work over every entity repository."""

    users: UserRepository
    skills: SkillRepository
    swaps: SwapRequestRepository
    notifications: NotificationRepository
    messages: MessageRepository
    ratings: RatingRepository
    availability: AvailabilityRepository

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass

    @abstractmethod
    async def refresh(self, instance) -> None:
        """Reload an entity after a statement that bypassed the identity map."""
        pass


class SQLAlchemyStore(Store):

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = SQLAlchemyUserRepository(session)
        self.skills = SQLAlchemySkillRepository(session)
        self.swaps = SQLAlchemySwapRequestRepository(session)
        self.notifications = SQLAlchemyNotificationRepository(session)
        self.messages = SQLAlchemyMessageRepository(session)
        self.ratings = SQLAlchemyRatingRepository(session)
        self.availability = SQLAlchemyAvailabilityRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def refresh(self, instance) -> None:
        await self.session.refresh(instance)


__all__ = [
    "Store",
    "SQLAlchemyStore",
    "UserRepository",
    "SkillRepository",
    "SwapRequestRepository",
    "NotificationRepository",
    "MessageRepository",
    "RatingRepository",
    "AvailabilityRepository",
]
