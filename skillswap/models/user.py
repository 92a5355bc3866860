"""User model — marketplace profile with offered / wanted skills."""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillswap.database import Base, utcnow
from skillswap.models.skill import Skill, user_skills_offered, user_skills_wanted


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    # ── Identity ──
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER)

    # ── Profile ──
    location: Mapped[Optional[str]] = mapped_column(String(200))
    photo_url: Mapped[Optional[str]] = mapped_column(String(500))
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)

    # ── Moderation ──
    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)

    # ── Relationships ──
    skills_offered: Mapped[List[Skill]] = relationship(
        secondary=user_skills_offered, lazy="selectin", order_by=Skill.id
    )
    skills_wanted: Mapped[List[Skill]] = relationship(
        secondary=user_skills_wanted, lazy="selectin", order_by=Skill.id
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def offers(self, skill_id: int) -> bool:
        return any(s.id == skill_id for s in self.skills_offered)

    def wants(self, skill_id: int) -> bool:
        return any(s.id == skill_id for s in self.skills_wanted)
