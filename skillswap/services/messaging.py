"""Direct messaging between users who share an accepted swap."""

import logging
from typing import List, Optional

from skillswap.errors import (
    DuplicateEntry,
    InvalidMessage,
    InvalidParticipants,
    NoChannel,
    NotFound,
)
from skillswap.models.message import Message
from skillswap.models.message_channel import MessageChannel
from skillswap.models.notification import NotificationType
from skillswap.repositories import Store
from skillswap.services.notifications import NotificationService

logger = logging.getLogger(__name__)


class MessagingService:

    def __init__(self, store: Store, notifications: NotificationService):
        self.store = store
        self.notifications = notifications

    async def open_channel(
        self, user_a: int, user_b: int, swap_id: Optional[int] = None
    ) -> MessageChannel:
        """Return the channel for the pair, creating it on first use."""
        channel = await self.store.messages.get_channel(user_a, user_b)
        if channel is not None:
            return channel

        low, high = MessageChannel.pair(user_a, user_b)
        try:
            channel = await self.store.messages.add_channel(
                MessageChannel(user_low_id=low, user_high_id=high, swap_id=swap_id)
            )
        except DuplicateEntry:
            # Opened concurrently by another swap between the same pair.
            return await self.store.messages.get_channel(user_a, user_b)
        logger.info("Opened message channel %s between users %s and %s", channel.id, low, high)
        return channel

    async def channel_exists(self, user_a: int, user_b: int) -> bool:
        return await self.store.messages.get_channel(user_a, user_b) is not None

    async def list_channels(self, user_id: int) -> List[MessageChannel]:
        return await self.store.messages.list_channels(user_id)

    async def send_message(
        self,
        sender_id: int,
        receiver_id: int,
        text: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Message:
        if sender_id == receiver_id:
            raise InvalidParticipants("Cannot send a message to yourself.")

        text = text.strip() if text else None
        image = image.strip() if image else None
        if not text and not image:
            raise InvalidMessage()

        sender = await self.store.users.get(sender_id)
        if sender is None:
            raise NotFound("Sender not found.")
        if await self.store.users.get(receiver_id) is None:
            raise NotFound("Receiver not found.")

        channel = await self.store.messages.get_channel(sender_id, receiver_id)
        if channel is None:
            raise NoChannel()

        with self.notifications.outbox_guard():
            message = await self.store.messages.add_message(
                Message(
                    channel_id=channel.id,
                    sender_id=sender_id,
                    receiver_id=receiver_id,
                    text=text,
                    image=image,
                )
            )
            await self.notifications.notify(
                receiver_id,
                NotificationType.MESSAGE_RECEIVED,
                f"{sender.name} sent you a message",
            )
            await self.store.commit()
        await self.notifications.deliver_pending()
        return message

    async def conversation(self, user_id: int, other_id: int, limit: int = 50) -> List[Message]:
        channel = await self.store.messages.get_channel(user_id, other_id)
        if channel is None:
            raise NoChannel()
        return await self.store.messages.list_messages(channel.id, limit)
