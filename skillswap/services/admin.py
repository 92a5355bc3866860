"""
Platform moderation for administrators.

Every operation re-checks the acting account: it must hold the admin role
and must not itself be banned. Admin accounts cannot be banned or deleted,
and an admin cannot revoke their own role.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from skillswap.database import utcnow
from skillswap.errors import Forbidden, NotFound
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.models.user import User, UserRole
from skillswap.repositories import Store
from skillswap.services.swaps import SwapService

logger = logging.getLogger(__name__)

ACTIVE_WINDOW = timedelta(days=30)


class AdminService:

    def __init__(self, store: Store, swaps: SwapService):
        self.store = store
        self.swaps = swaps

    async def _require_admin(self, admin_id: int) -> User:
        admin = await self.store.users.get(admin_id)
        if admin is None or not admin.is_admin:
            raise Forbidden("Admin privileges required.")
        if admin.is_banned:
            raise Forbidden("Admin account is banned.")
        return admin

    async def _target(self, user_id: int) -> User:
        user = await self.store.users.get(user_id)
        if user is None:
            raise NotFound("User not found.")
        return user

    # ── Users ──

    async def list_users(
        self,
        admin_id: int,
        search: Optional[str] = None,
        is_banned: Optional[bool] = None,
        role: Optional[UserRole] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        await self._require_admin(admin_id)
        return await self.store.users.list_for_admin(
            search=(search or "").strip() or None,
            is_banned=is_banned,
            role=role,
            limit=limit,
            offset=offset,
        )

    async def ban_user(self, admin_id: int, user_id: int) -> User:
        await self._require_admin(admin_id)
        user = await self._target(user_id)
        if user.is_admin:
            raise Forbidden("Cannot ban an admin user.")
        return await self._set_banned(admin_id, user, True)

    async def unban_user(self, admin_id: int, user_id: int) -> User:
        await self._require_admin(admin_id)
        return await self._set_banned(admin_id, await self._target(user_id), False)

    async def _set_banned(self, admin_id: int, user: User, banned: bool) -> User:
        user.is_banned = banned
        await self.store.users.save(user)
        await self.store.commit()
        logger.info("User %s %s by admin %s", user.id, "banned" if banned else "unbanned", admin_id)
        return user

    async def delete_user(self, admin_id: int, user_id: int) -> User:
        await self._require_admin(admin_id)
        user = await self._target(user_id)
        if user.is_admin:
            raise Forbidden("Cannot delete an admin user.")
        user.deleted_at = utcnow()
        await self.store.users.save(user)
        await self.store.commit()
        logger.info("User %s deleted by admin %s", user_id, admin_id)
        return user

    async def promote(self, admin_id: int, user_id: int) -> User:
        await self._require_admin(admin_id)
        return await self._set_role(admin_id, await self._target(user_id), UserRole.ADMIN)

    async def demote(self, admin_id: int, user_id: int) -> User:
        await self._require_admin(admin_id)
        if admin_id == user_id:
            raise Forbidden("Cannot remove admin privileges from yourself.")
        return await self._set_role(admin_id, await self._target(user_id), UserRole.USER)

    async def _set_role(self, admin_id: int, user: User, role: UserRole) -> User:
        user.role = role
        await self.store.users.save(user)
        await self.store.commit()
        logger.info("User %s is now %s (admin %s)", user.id, role.value, admin_id)
        return user

    # ── Swaps ──

    async def list_swaps(
        self,
        admin_id: int,
        status: Optional[SwapStatus] = None,
        requester_id: Optional[int] = None,
        responder_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[SwapRequest], int]:
        await self._require_admin(admin_id)
        return await self.store.swaps.list_all(status, requester_id, responder_id, limit, offset)

    async def cancel_swap(self, admin_id: int, swap_id: int, reason: str) -> SwapRequest:
        await self._require_admin(admin_id)
        return await self.swaps.moderate_cancel(
            swap_id, admin_id, reason.strip() or "No reason given."
        )

    # ── Statistics ──

    async def platform_stats(self, admin_id: int) -> dict:
        await self._require_admin(admin_id)
        now = utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        total_ratings, average_rating = await self.store.ratings.totals()
        return {
            "total_users": await self.store.users.count(),
            "active_users": await self.store.swaps.active_user_count(now - ACTIVE_WINDOW),
            "total_swaps": await self.store.swaps.count(),
            "accepted_swaps": await self.store.swaps.count(status=SwapStatus.ACCEPTED),
            "pending_swaps": await self.store.swaps.count(status=SwapStatus.PENDING),
            "total_skills": await self.store.skills.count(),
            "total_ratings": total_ratings,
            "average_rating": average_rating,
            "new_users_this_month": await self.store.users.count(since=month_start),
            "swaps_this_month": await self.store.swaps.count(since=month_start),
        }
