"""
Swap-request repository.

Status changes go through :meth:`SwapRequestRepository.transition`, a
compare-and-swap on ``status``: the UPDATE only matches while the row still
holds the expected status, so of two racing writers exactly one sees a
matched row.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import desc, func, or_, select, union, update
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import utcnow
from skillswap.models.swap_request import SwapRequest, SwapStatus

TERMINAL_STATUSES = tuple(s for s in SwapStatus if s.is_terminal)


class SwapRequestRepository(ABC):
    """Data access contract for swap requests."""

    @abstractmethod
    async def get(self, swap_id: int) -> Optional[SwapRequest]:
        pass

    @abstractmethod
    async def add(self, swap: SwapRequest) -> SwapRequest:
        pass

    @abstractmethod
    async def find_pending_duplicate(
        self, requester_id: int, responder_id: int, offered_skill_id: int, wanted_skill_id: int
    ) -> Optional[SwapRequest]:
        pass

    @abstractmethod
    async def transition(
        self,
        swap_id: int,
        expected: SwapStatus,
        new: SwapStatus,
        deleted_at: Optional[datetime] = None,
    ) -> bool:
        """Set ``new`` only if the stored status is still ``expected``."""
        pass

    @abstractmethod
    async def mark_completed(self, swap_id: int) -> bool:
        """Stamp ``completed_at`` on an accepted, not yet completed swap."""
        pass

    @abstractmethod
    async def list_for_user(
        self,
        user_id: int,
        status: Optional[SwapStatus] = None,
        sent: bool = True,
        received: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SwapRequest]:
        """Newest first."""
        pass

    @abstractmethod
    async def list_history(self, user_id: int, limit: int = 50) -> List[SwapRequest]:
        """Terminal swaps the user took part in, most recently updated first."""
        pass

    @abstractmethod
    async def list_all(
        self,
        status: Optional[SwapStatus] = None,
        requester_id: Optional[int] = None,
        responder_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[SwapRequest], int]:
        """Every swap, deleted ones included, newest first, plus the filtered total."""
        pass

    @abstractmethod
    async def count(
        self, status: Optional[SwapStatus] = None, since: Optional[datetime] = None
    ) -> int:
        pass

    @abstractmethod
    async def active_user_count(self, since: datetime) -> int:
        """Distinct users on either side of a swap created after ``since``."""
        pass


class SQLAlchemySwapRequestRepository(SwapRequestRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    def _visible(self):
        return select(SwapRequest).where(SwapRequest.deleted_at.is_(None))

    async def get(self, swap_id: int) -> Optional[SwapRequest]:
        # Always re-read: another session may have moved the status since.
        result = await self.session.execute(
            select(SwapRequest)
            .where(SwapRequest.id == swap_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add(self, swap: SwapRequest) -> SwapRequest:
        self.session.add(swap)
        await self.session.flush()
        await self.session.refresh(swap, ["offered_skill", "wanted_skill"])
        return swap

    async def find_pending_duplicate(
        self, requester_id: int, responder_id: int, offered_skill_id: int, wanted_skill_id: int
    ) -> Optional[SwapRequest]:
        result = await self.session.execute(
            self._visible().where(
                SwapRequest.requester_id == requester_id,
                SwapRequest.responder_id == responder_id,
                SwapRequest.offered_skill_id == offered_skill_id,
                SwapRequest.wanted_skill_id == wanted_skill_id,
                SwapRequest.status == SwapStatus.PENDING,
            ).limit(1)
        )
        return result.scalar_one_or_none()

    async def transition(
        self,
        swap_id: int,
        expected: SwapStatus,
        new: SwapStatus,
        deleted_at: Optional[datetime] = None,
    ) -> bool:
        values = {"status": new, "updated_at": utcnow()}
        if deleted_at is not None:
            values["deleted_at"] = deleted_at

        result = await self.session.execute(
            update(SwapRequest)
            .where(SwapRequest.id == swap_id, SwapRequest.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_completed(self, swap_id: int) -> bool:
        now = utcnow()
        result = await self.session.execute(
            update(SwapRequest)
            .where(
                SwapRequest.id == swap_id,
                SwapRequest.status == SwapStatus.ACCEPTED,
                SwapRequest.completed_at.is_(None),
            )
            .values(completed_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_for_user(
        self,
        user_id: int,
        status: Optional[SwapStatus] = None,
        sent: bool = True,
        received: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SwapRequest]:
        stmt = self._visible()
        if sent and not received:
            stmt = stmt.where(SwapRequest.requester_id == user_id)
        elif received and not sent:
            stmt = stmt.where(SwapRequest.responder_id == user_id)
        else:
            stmt = stmt.where(
                or_(SwapRequest.requester_id == user_id, SwapRequest.responder_id == user_id)
            )
        if status is not None:
            stmt = stmt.where(SwapRequest.status == status)

        stmt = stmt.order_by(desc(SwapRequest.created_at), desc(SwapRequest.id))
        result = await self.session.execute(stmt.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def list_history(self, user_id: int, limit: int = 50) -> List[SwapRequest]:
        result = await self.session.execute(
            select(SwapRequest)
            .where(
                or_(SwapRequest.requester_id == user_id, SwapRequest.responder_id == user_id),
                SwapRequest.status.in_(TERMINAL_STATUSES),
            )
            .order_by(desc(SwapRequest.updated_at), desc(SwapRequest.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_all(
        self,
        status: Optional[SwapStatus] = None,
        requester_id: Optional[int] = None,
        responder_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[SwapRequest], int]:
        conditions = []
        if status is not None:
            conditions.append(SwapRequest.status == status)
        if requester_id is not None:
            conditions.append(SwapRequest.requester_id == requester_id)
        if responder_id is not None:
            conditions.append(SwapRequest.responder_id == responder_id)

        total = (
            await self.session.execute(select(func.count(SwapRequest.id)).where(*conditions))
        ).scalar() or 0
        result = await self.session.execute(
            select(SwapRequest)
            .where(*conditions)
            .order_by(desc(SwapRequest.created_at), desc(SwapRequest.id))
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total

    async def count(
        self, status: Optional[SwapStatus] = None, since: Optional[datetime] = None
    ) -> int:
        stmt = select(func.count(SwapRequest.id))
        if status is not None:
            stmt = stmt.where(SwapRequest.status == status)
        if since is not None:
            stmt = stmt.where(SwapRequest.created_at >= since)
        return (await self.session.execute(stmt)).scalar() or 0

    async def active_user_count(self, since: datetime) -> int:
        participants = union(
            select(SwapRequest.requester_id.label("user_id")).where(SwapRequest.created_at >= since),
            select(SwapRequest.responder_id.label("user_id")).where(SwapRequest.created_at >= since),
        ).subquery()
        result = await self.session.execute(select(func.count()).select_from(participants))
        return result.scalar() or 0
