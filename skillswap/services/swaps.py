"""
Swap request state machine.

    pending ──accept (responder)──▶ accepted
       │  ──reject (responder)──▶ rejected
       └──cancel (requester)────▶ cancelled

Every transition leaves ``pending`` exactly once. Writers on the same swap
are serialised by a per-swap lock inside the process, and the status write
itself is a compare-and-swap in the database, so a racing accept and cancel
resolve to whichever commits first; the other gets ``InvalidTransition``.
Admins may cancel any pending swap through the same path, with a reason.
"""

import enum
import logging
from typing import Dict, List, Optional

from skillswap.config import settings
from skillswap.database import utcnow
from skillswap.errors import (
    DuplicateSwapRequest,
    Forbidden,
    InvalidParticipants,
    InvalidTransition,
    NotFound,
    SkillNotOffered,
    UnknownSkill,
)
from skillswap.models.notification import NotificationType
from skillswap.models.swap_request import SwapRequest, SwapStatus
from skillswap.models.user import User
from skillswap.repositories import Store
from skillswap.services.locks import KeyedLocks, swap_locks
from skillswap.services.messaging import MessagingService
from skillswap.services.notifications import NotificationService, swap_dedup_key

logger = logging.getLogger(__name__)


class SwapRole(str, enum.Enum):
    REQUESTER = "requester"
    RESPONDER = "responder"


# Target status → the participant allowed to move a pending swap there.
TRANSITIONS: Dict[SwapStatus, SwapRole] = {
    SwapStatus.ACCEPTED: SwapRole.RESPONDER,
    SwapStatus.REJECTED: SwapRole.RESPONDER,
    SwapStatus.CANCELLED: SwapRole.REQUESTER,
}


class SwapService:

    def __init__(
        self,
        store: Store,
        notifications: NotificationService,
        messaging: MessagingService,
        locks: KeyedLocks = swap_locks,
        notify_on_cancel: Optional[bool] = None,
        soft_delete_on_cancel: Optional[bool] = None,
    ):
        self.store = store
        self.notifications = notifications
        self.messaging = messaging
        self.locks = locks
        self.notify_on_cancel = (
            settings.NOTIFY_ON_CANCEL if notify_on_cancel is None else notify_on_cancel
        )
        self.soft_delete_on_cancel = (
            settings.SOFT_DELETE_ON_CANCEL if soft_delete_on_cancel is None else soft_delete_on_cancel
        )

    # ═══════════════════════════════════════════════════════════════
    #  Create
    # ═══════════════════════════════════════════════════════════════

    async def create(
        self,
        requester_id: int,
        responder_id: int,
        offered_skill_id: int,
        wanted_skill_id: int,
    ) -> SwapRequest:
        """Validate and store a new ``pending`` request, then notify the responder."""
        if requester_id == responder_id:
            raise InvalidParticipants()

        skills = await self.store.skills.get_many([offered_skill_id, wanted_skill_id])
        missing = sorted({offered_skill_id, wanted_skill_id} - skills.keys())
        if missing:
            raise UnknownSkill(f"Unknown skill id(s): {', '.join(map(str, missing))}.")
        offered, wanted = skills[offered_skill_id], skills[wanted_skill_id]

        requester = await self.store.users.get(requester_id)
        if requester is None:
            raise NotFound("Requester not found.")
        responder = await self.store.users.get(responder_id)
        if responder is None:
            raise NotFound("Responder not found.")

        if not requester.offers(offered_skill_id):
            raise SkillNotOffered(f"You do not offer {offered.name}.")
        if not responder.offers(wanted_skill_id):
            raise SkillNotOffered(f"{responder.name} does not offer {wanted.name}.")

        async with self.locks.hold(("pair", requester_id, responder_id)):
            duplicate = await self.store.swaps.find_pending_duplicate(
                requester_id, responder_id, offered_skill_id, wanted_skill_id
            )
            if duplicate is not None:
                raise DuplicateSwapRequest()

            with self.notifications.outbox_guard():
                swap = await self.store.swaps.add(
                    SwapRequest(
                        requester_id=requester_id,
                        responder_id=responder_id,
                        offered_skill_id=offered_skill_id,
                        wanted_skill_id=wanted_skill_id,
                        status=SwapStatus.PENDING,
                    )
                )
                await self.notifications.notify(
                    responder_id,
                    NotificationType.SWAP_REQUEST,
                    f"{requester.name} wants to swap {offered.name} for {wanted.name}",
                    swap_id=swap.id,
                    dedup_key=swap_dedup_key(swap.id, NotificationType.SWAP_REQUEST),
                )
                await self.store.commit()

        logger.info(
            "Swap %s created: user %s offers %s to user %s for %s",
            swap.id, requester_id, offered.name, responder_id, wanted.name,
        )
        await self.notifications.deliver_pending()
        return swap

    # ═══════════════════════════════════════════════════════════════
    #  Transitions
    # ═══════════════════════════════════════════════════════════════

    async def accept(self, swap_id: int, acting_user_id: int) -> SwapRequest:
        return await self._transition(swap_id, acting_user_id, SwapStatus.ACCEPTED)

    async def reject(self, swap_id: int, acting_user_id: int) -> SwapRequest:
        return await self._transition(swap_id, acting_user_id, SwapStatus.REJECTED)

    async def cancel(self, swap_id: int, acting_user_id: int) -> SwapRequest:
        return await self._transition(swap_id, acting_user_id, SwapStatus.CANCELLED)

    async def moderate_cancel(self, swap_id: int, admin_id: int, reason: str) -> SwapRequest:
        """Cancel a pending swap on behalf of the platform; the caller checks admin rights."""
        return await self._transition(
            swap_id, admin_id, SwapStatus.CANCELLED, moderated=True, reason=reason
        )

    async def _transition(
        self,
        swap_id: int,
        acting_user_id: int,
        target: SwapStatus,
        moderated: bool = False,
        reason: Optional[str] = None,
    ) -> SwapRequest:
        async with self.locks.hold(swap_id):
            swap = await self.store.swaps.get(swap_id)
            if swap is None:
                raise NotFound(f"Swap request {swap_id} not found.")

            if not moderated:
                role = TRANSITIONS[target]
                allowed_id = swap.responder_id if role is SwapRole.RESPONDER else swap.requester_id
                if acting_user_id != allowed_id:
                    raise Forbidden(f"Only the {role.value} can mark this swap {target.value}.")

            if swap.status is not SwapStatus.PENDING:
                raise InvalidTransition(f"Swap request is already {swap.status.value}.")

            deleted_at = utcnow() if (
                target is SwapStatus.CANCELLED and self.soft_delete_on_cancel
            ) else None
            if not await self.store.swaps.transition(
                swap_id, SwapStatus.PENDING, target, deleted_at=deleted_at
            ):
                # Another process committed a transition between our read and write.
                raise InvalidTransition("Swap request is no longer pending.")

            with self.notifications.outbox_guard():
                await self.store.refresh(swap)
                if moderated:
                    swap.cancel_reason = reason
                    await self._after_moderation(swap, reason)
                else:
                    await self._after_transition(swap, target)
                await self.store.commit()

        logger.info(
            "Swap %s %s by %s %s", swap_id, target.value,
            "admin" if moderated else "user", acting_user_id,
        )
        await self.notifications.deliver_pending()
        return swap

    async def _after_moderation(self, swap: SwapRequest, reason: str) -> None:
        offered, wanted = swap.offered_skill.name, swap.wanted_skill.name
        for user_id in (swap.requester_id, swap.responder_id):
            await self.notifications.notify(
                user_id,
                NotificationType.SWAP_CANCELLED,
                f"A moderator cancelled the swap of {offered} for {wanted}: {reason}",
                swap_id=swap.id,
                dedup_key=f"{swap_dedup_key(swap.id, NotificationType.SWAP_CANCELLED)}:{user_id}",
            )

    async def _after_transition(self, swap: SwapRequest, target: SwapStatus) -> None:
        offered, wanted = swap.offered_skill.name, swap.wanted_skill.name

        if target is SwapStatus.ACCEPTED:
            responder = await self.store.users.get(swap.responder_id, include_deleted=True)
            await self.notifications.notify(
                swap.requester_id,
                NotificationType.SWAP_ACCEPTED,
                f"{responder.name} accepted your swap of {offered} for {wanted}",
                swap_id=swap.id,
                dedup_key=swap_dedup_key(swap.id, NotificationType.SWAP_ACCEPTED),
            )
            await self.messaging.open_channel(swap.requester_id, swap.responder_id, swap.id)

        elif target is SwapStatus.REJECTED:
            responder = await self.store.users.get(swap.responder_id, include_deleted=True)
            await self.notifications.notify(
                swap.requester_id,
                NotificationType.SWAP_REJECTED,
                f"{responder.name} declined your swap of {offered} for {wanted}",
                swap_id=swap.id,
                dedup_key=swap_dedup_key(swap.id, NotificationType.SWAP_REJECTED),
            )

        elif target is SwapStatus.CANCELLED and self.notify_on_cancel:
            requester = await self.store.users.get(swap.requester_id, include_deleted=True)
            await self.notifications.notify(
                swap.responder_id,
                NotificationType.SWAP_CANCELLED,
                f"{requester.name} withdrew their swap of {offered} for {wanted}",
                swap_id=swap.id,
                dedup_key=swap_dedup_key(swap.id, NotificationType.SWAP_CANCELLED),
            )

    # ═══════════════════════════════════════════════════════════════
    #  Completion
    # ═══════════════════════════════════════════════════════════════

    async def complete(self, swap_id: int, acting_user_id: int) -> SwapRequest:
        """Record that an accepted exchange took place. Status stays ``accepted``."""
        async with self.locks.hold(swap_id):
            swap = await self.store.swaps.get(swap_id)
            if swap is None:
                raise NotFound(f"Swap request {swap_id} not found.")
            if not swap.involves(acting_user_id):
                raise Forbidden("Only participants can complete a swap.")
            if swap.status is not SwapStatus.ACCEPTED:
                raise InvalidTransition("Only accepted swaps can be completed.")
            if swap.completed_at is not None:
                raise InvalidTransition("Swap is already completed.")

            if not await self.store.swaps.mark_completed(swap_id):
                raise InvalidTransition("Swap is already completed.")
            await self.store.refresh(swap)
            await self.store.commit()

        logger.info("Swap %s completed by user %s", swap_id, acting_user_id)
        return swap

    # ═══════════════════════════════════════════════════════════════
    #  Queries
    # ═══════════════════════════════════════════════════════════════

    async def get(self, swap_id: int, viewer: User) -> SwapRequest:
        swap = await self.store.swaps.get(swap_id)
        if swap is None:
            raise NotFound(f"Swap request {swap_id} not found.")
        if not swap.involves(viewer.id) and not viewer.is_admin:
            raise Forbidden("Only participants can view this swap request.")
        return swap

    async def list_for_user(
        self,
        user_id: int,
        status: Optional[SwapStatus] = None,
        direction: Optional[SwapRole] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SwapRequest]:
        """``direction`` REQUESTER lists sent requests, RESPONDER received ones."""
        return await self.store.swaps.list_for_user(
            user_id,
            status=status,
            sent=direction in (None, SwapRole.REQUESTER),
            received=direction in (None, SwapRole.RESPONDER),
            limit=limit,
            offset=offset,
        )

    async def overview(self, user_id: int) -> Dict[str, List[SwapRequest]]:
        return {
            "sent": await self.list_for_user(user_id, direction=SwapRole.REQUESTER),
            "received": await self.list_for_user(user_id, direction=SwapRole.RESPONDER),
        }

    async def history(self, user_id: int, limit: int = 50) -> List[SwapRequest]:
        return await self.store.swaps.list_history(user_id, limit)
