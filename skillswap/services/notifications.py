"""
Notification dispatch.

``notify`` is purely additive: every call appends a new unread record,
except when a ``dedup_key`` is given and a record with that key already
exists, in which case the existing one is returned untouched. Delivery to
consumers is at-least-once, so the state machine keys its notifications by
``(swap, type)``.
"""

import logging
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, List, Optional, Tuple

from skillswap.config import settings
from skillswap.errors import NotFound
from skillswap.models.notification import Notification, NotificationType
from skillswap.repositories import Store
from skillswap.services.mailer import send_notification_email

logger = logging.getLogger(__name__)

EMAIL_SUBJECTS = {
    NotificationType.SWAP_REQUEST: "New swap request",
    NotificationType.SWAP_ACCEPTED: "Your swap request was accepted",
    NotificationType.SWAP_REJECTED: "Your swap request was declined",
    NotificationType.MESSAGE_RECEIVED: "You have a new message",
    NotificationType.SWAP_CANCELLED: "A swap request was withdrawn",
}

Mailer = Callable[[str, str, str], Awaitable[bool]]


def swap_dedup_key(swap_id: int, notification_type: NotificationType) -> str:
    return f"swap:{swap_id}:{notification_type.value}"


class NotificationService:

    def __init__(
        self,
        store: Store,
        email_enabled: Optional[bool] = None,
        mailer: Mailer = send_notification_email,
    ):
        self.store = store
        self.email_enabled = settings.EMAIL_NOTIFICATIONS if email_enabled is None else email_enabled
        self.mailer = mailer
        self._outbox: List[Tuple[int, NotificationType, str]] = []

    async def notify(
        self,
        recipient_id: int,
        notification_type: NotificationType,
        content: str,
        swap_id: Optional[int] = None,
        dedup_key: Optional[str] = None,
    ) -> Notification:
        """Append an unread notification for ``recipient_id``."""
        if dedup_key:
            existing = await self.store.notifications.get_by_dedup_key(dedup_key)
            if existing is not None:
                logger.debug("Notification %s already delivered", dedup_key)
                return existing

        notification = await self.store.notifications.add(
            Notification(
                user_id=recipient_id,
                type=notification_type,
                content=content,
                is_read=False,
                swap_id=swap_id,
                dedup_key=dedup_key,
            )
        )
        logger.info(
            "Notification %s (%s) queued for user %s",
            notification.id, notification_type.value, recipient_id,
        )
        if self.email_enabled:
            self._outbox.append((recipient_id, notification_type, content))
        return notification

    async def deliver_pending(self) -> int:
        """Email the notifications created so far; call after the commit."""
        outbox, self._outbox = self._outbox, []
        sent = 0
        for recipient_id, notification_type, content in outbox:
            user = await self.store.users.get(recipient_id)
            if user is None:
                continue
            if await self.mailer(user.email, EMAIL_SUBJECTS[notification_type], content):
                sent += 1
        return sent

    def discard_pending(self) -> None:
        self._outbox.clear()

    @contextmanager
    def outbox_guard(self) -> Iterator[None]:
        """Drop queued emails when the enclosed unit of work fails before commit."""
        try:
            yield
        except Exception:
            self.discard_pending()
            raise

    # ── Queries ──

    async def list_for_user(
        self, user_id: int, unread_only: bool = False, limit: int = 20
    ) -> List[Notification]:
        return await self.store.notifications.list_for_user(user_id, unread_only, limit)

    async def unread_count(self, user_id: int) -> int:
        return await self.store.notifications.count_for_user(user_id, unread_only=True)

    async def stats(self, user_id: int) -> dict:
        total = await self.store.notifications.count_for_user(user_id)
        unread = await self.store.notifications.count_for_user(user_id, unread_only=True)
        return {"total": total, "unread": unread, "read": total - unread}

    # ── Read flag ──

    async def mark_read(self, notification_id: int, user_id: int) -> Notification:
        notification = await self.store.notifications.get(notification_id)
        # Other users' notifications are reported as missing, not forbidden.
        if notification is None or notification.user_id != user_id:
            raise NotFound("Notification not found.")
        if not notification.is_read:
            notification.is_read = True
            await self.store.commit()
        return notification

    async def mark_all_read(self, user_id: int) -> int:
        updated = await self.store.notifications.mark_all_read(user_id)
        await self.store.commit()
        return updated

    async def delete(self, notification_id: int, user_id: int) -> None:
        notification = await self.store.notifications.get(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFound("Notification not found.")
        await self.store.notifications.delete(notification)
        await self.store.commit()
