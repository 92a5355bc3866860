"""Message channel model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from skillswap.database import Base, utcnow


class MessageChannel(Base):
    """
    A MessageChannel is opened when a swap request is accepted.
    One channel per unordered pair of users; Messages belong to it.
    """
    __tablename__ = "message_channels"
    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_channel_pair"),
        CheckConstraint("user_low_id < user_high_id", name="ck_channel_pair_order"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_low_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user_high_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    swap_id: Mapped[Optional[int]] = mapped_column(ForeignKey("swap_requests.id", ondelete="SET NULL"))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @staticmethod
    def pair(a: int, b: int) -> tuple:
        return (a, b) if a < b else (b, a)

    def other_user(self, user_id: int) -> int:
        return self.user_high_id if user_id == self.user_low_id else self.user_low_id
