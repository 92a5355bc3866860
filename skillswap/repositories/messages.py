"""Message channel and direct message repository."""

from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import desc, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import DuplicateEntry
from skillswap.models.message import Message
from skillswap.models.message_channel import MessageChannel


class MessageRepository(ABC):

    @abstractmethod
    async def get_channel(self, user_a: int, user_b: int) -> Optional[MessageChannel]:
        pass

    @abstractmethod
    async def add_channel(self, channel: MessageChannel) -> MessageChannel:
        """Raises ``DuplicateEntry`` when the pair already has a channel."""
        pass

    @abstractmethod
    async def list_channels(self, user_id: int) -> List[MessageChannel]:
        pass

    @abstractmethod
    async def add_message(self, message: Message) -> Message:
        pass

    @abstractmethod
    async def list_messages(self, channel_id: int, limit: int = 50) -> List[Message]:
        """The newest ``limit`` messages, returned oldest first."""
        pass


class SQLAlchemyMessageRepository(MessageRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_channel(self, user_a: int, user_b: int) -> Optional[MessageChannel]:
        low, high = MessageChannel.pair(user_a, user_b)
        result = await self.session.execute(
            select(MessageChannel).where(
                MessageChannel.user_low_id == low,
                MessageChannel.user_high_id == high,
            )
        )
        return result.scalar_one_or_none()

    async def add_channel(self, channel: MessageChannel) -> MessageChannel:
        try:
            async with self.session.begin_nested():
                self.session.add(channel)
        except IntegrityError as exc:
            raise DuplicateEntry(
                f"channel {channel.user_low_id}-{channel.user_high_id} already exists"
            ) from exc
        return channel

    async def list_channels(self, user_id: int) -> List[MessageChannel]:
        result = await self.session.execute(
            select(MessageChannel)
            .where(
                or_(MessageChannel.user_low_id == user_id, MessageChannel.user_high_id == user_id)
            )
            .order_by(desc(MessageChannel.created_at), desc(MessageChannel.id))
        )
        return list(result.scalars().all())

    async def add_message(self, message: Message) -> Message:
        self.session.add(message)
        await self.session.flush()
        return message

    async def list_messages(self, channel_id: int, limit: int = 50) -> List[Message]:
        result = await self.session.execute(
            select(Message)
            .where(Message.channel_id == channel_id)
            .order_by(desc(Message.created_at), desc(Message.id))
            .limit(limit)
        )
        messages = list(result.scalars().all())
        messages.reverse()  # chronological order for display
        return messages
