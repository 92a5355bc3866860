"""Registration, profile settings and skill-set management."""

import logging
from typing import Optional

from skillswap.database import utcnow
from skillswap.errors import DuplicateEntry, EmailTaken, NotFound, UnknownSkill
from skillswap.models.skill import Skill
from skillswap.models.user import User, UserRole
from skillswap.repositories import Store

logger = logging.getLogger(__name__)

# Fields a user may change on their own profile; only the nullable ones may be cleared.
PROFILE_FIELDS = ("name", "location", "photo_url", "is_public")
NULLABLE_PROFILE_FIELDS = ("location", "photo_url")


class UserService:

    def __init__(self, store: Store):
        self.store = store

    async def register(
        self,
        name: str,
        email: str,
        location: Optional[str] = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        if await self.store.users.get_by_email(email) is not None:
            raise EmailTaken()
        try:
            user = await self.store.users.add(
                User(name=name.strip(), email=email.lower(), location=location, role=role)
            )
        except DuplicateEntry:
            raise EmailTaken()
        await self.store.commit()
        logger.info("Registered user %s <%s>", user.id, user.email)
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.store.users.get(user_id)
        if user is None:
            raise NotFound("User not found.")
        return user

    async def update_profile(self, user_id: int, **changes) -> User:
        user = await self.get_user(user_id)
        for key, value in changes.items():
            if key not in PROFILE_FIELDS:
                continue
            if value is None and key not in NULLABLE_PROFILE_FIELDS:
                continue
            setattr(user, key, value)
        await self.store.users.save(user)
        await self.store.commit()
        return user

    async def soft_delete(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        user.deleted_at = utcnow()
        await self.store.users.save(user)
        await self.store.commit()
        logger.info("Soft-deleted user %s", user_id)
        return user

    # ── Skill sets ──

    async def _skill(self, skill_id: int) -> Skill:
        skill = await self.store.skills.get(skill_id)
        if skill is None:
            raise UnknownSkill(f"Unknown skill id: {skill_id}.")
        return skill

    async def add_offered(self, user_id: int, skill_id: int) -> User:
        user, skill = await self.get_user(user_id), await self._skill(skill_id)
        if not user.offers(skill_id):
            user.skills_offered.append(skill)
            await self.store.users.save(user)
            await self.store.commit()
        return user

    async def remove_offered(self, user_id: int, skill_id: int) -> User:
        user = await self.get_user(user_id)
        user.skills_offered = [s for s in user.skills_offered if s.id != skill_id]
        await self.store.users.save(user)
        await self.store.commit()
        return user

    async def add_wanted(self, user_id: int, skill_id: int) -> User:
        user, skill = await self.get_user(user_id), await self._skill(skill_id)
        if not user.wants(skill_id):
            user.skills_wanted.append(skill)
            await self.store.users.save(user)
            await self.store.commit()
        return user

    async def remove_wanted(self, user_id: int, skill_id: int) -> User:
        user = await self.get_user(user_id)
        user.skills_wanted = [s for s in user.skills_wanted if s.id != skill_id]
        await self.store.users.save(user)
        await self.store.commit()
        return user
