"""Notification repository. Records only change through the read flag or deletion by their owner."""

from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import utcnow
from skillswap.models.notification import Notification


class NotificationRepository(ABC):

    @abstractmethod
    async def add(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def get(self, notification_id: int) -> Optional[Notification]:
        pass

    @abstractmethod
    async def get_by_dedup_key(self, key: str) -> Optional[Notification]:
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: int, unread_only: bool = False, limit: int = 20
    ) -> List[Notification]:
        pass

    @abstractmethod
    async def count_for_user(self, user_id: int, unread_only: bool = False) -> int:
        pass

    @abstractmethod
    async def delete(self, notification: Notification) -> None:
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: int) -> int:
        """Return the number of notifications flipped to read."""
        pass


class SQLAlchemyNotificationRepository(NotificationRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def get(self, notification_id: int) -> Optional[Notification]:
        return await self.session.get(Notification, notification_id)

    async def get_by_dedup_key(self, key: str) -> Optional[Notification]:
        result = await self.session.execute(
            select(Notification).where(Notification.dedup_key == key)
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self, user_id: int, unread_only: bool = False, limit: int = 20
    ) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        result = await self.session.execute(
            stmt.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(self, user_id: int, unread_only: bool = False) -> int:
        stmt = select(func.count(Notification.id)).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        return (await self.session.execute(stmt)).scalar() or 0

    async def mark_all_read(self, user_id: int) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def delete(self, notification: Notification) -> None:
        await self.session.delete(notification)
        await self.session.flush()
