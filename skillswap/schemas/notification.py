"""Notification Pydantic schemas."""

from typing import List, Optional

from pydantic import AliasChoices, Field

from skillswap.models.notification import NotificationType
from skillswap.schemas.base import BaseSchema, TimestampedSchema


class NotificationOut(TimestampedSchema):
    notification_id: int = Field(validation_alias=AliasChoices("id", "notificationId"))
    user_id: int
    type: NotificationType
    content: str
    is_read: bool
    swap_id: Optional[int] = None


class NotificationListOut(BaseSchema):
    unread_count: int
    notifications: List[NotificationOut]


class NotificationStatsOut(BaseSchema):
    total: int
    unread: int
    read: int
