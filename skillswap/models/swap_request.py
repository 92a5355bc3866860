"""Swap-request model — the central transactional entity."""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillswap.database import Base, utcnow
from skillswap.models.skill import Skill


class SwapStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not SwapStatus.PENDING


class SwapRequest(Base):
    __tablename__ = "swap_requests"
    __table_args__ = (
        CheckConstraint("requester_id <> responder_id", name="ck_swap_distinct_users"),
        Index("ix_swap_requests_pair", "requester_id", "responder_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    requester_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    responder_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    offered_skill_id: Mapped[int] = mapped_column(ForeignKey("skills.id"), nullable=False)
    wanted_skill_id: Mapped[int] = mapped_column(ForeignKey("skills.id"), nullable=False)
    status: Mapped[SwapStatus] = mapped_column(
        Enum(SwapStatus), default=SwapStatus.PENDING, nullable=False
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    cancel_reason: Mapped[Optional[str]] = mapped_column(Text)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # ── Relationships ──
    offered_skill: Mapped[Skill] = relationship(foreign_keys=[offered_skill_id], lazy="selectin")
    wanted_skill: Mapped[Skill] = relationship(foreign_keys=[wanted_skill_id], lazy="selectin")

    def involves(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.responder_id)

    def counterpart_of(self, user_id: int) -> int:
        return self.responder_id if user_id == self.requester_id else self.requester_id
