"""Notification model — in-app notifications for swap and message events."""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skillswap.database import Base, utcnow


class NotificationType(str, enum.Enum):
    SWAP_REQUEST = "swapRequest"
    SWAP_ACCEPTED = "swapAccepted"
    SWAP_REJECTED = "swapRejected"
    MESSAGE_RECEIVED = "messageReceived"
    # Only emitted when NOTIFY_ON_CANCEL is enabled.
    SWAP_CANCELLED = "swapCancelled"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[NotificationType] = mapped_column(Enum(NotificationType), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    swap_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("swap_requests.id", ondelete="SET NULL")
    )
    # (swap, type) idempotency key; NULL for events that have none.
    dedup_key: Mapped[Optional[str]] = mapped_column(String(100), unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
