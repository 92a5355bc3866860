"""User directory repository: profiles, skill sets and the browse query."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.errors import DuplicateEntry
from skillswap.models.rating import Rating
from skillswap.models.skill import Skill
from skillswap.models.user import User, UserRole


class UserRepository(ABC):
    """Data access contract for users."""

    @abstractmethod
    async def get(self, user_id: int, include_deleted: bool = False) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        """Raises ``DuplicateEntry`` when the email is already registered."""
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Flush pending attribute / skill-set changes of a loaded user."""
        pass

    @abstractmethod
    async def search(
        self,
        name_contains: Optional[str] = None,
        skill_ids: Optional[Iterable[int]] = None,
        location: Optional[str] = None,
        is_public: Optional[bool] = None,
        min_rating: Optional[float] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[User]:
        """Directory query, always ordered by user id."""
        pass

    @abstractmethod
    async def find_mutual(
        self, user_id: int, offered_ids: Iterable[int], wanted_ids: Iterable[int]
    ) -> List[User]:
        """Public users who want one of ``offered_ids`` and offer one of ``wanted_ids``."""
        pass

    @abstractmethod
    async def list_for_admin(
        self,
        search: Optional[str] = None,
        is_banned: Optional[bool] = None,
        role: Optional[UserRole] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        """One page of users, newest first, plus the total matching the filters."""
        pass

    @abstractmethod
    async def count(self, since: Optional[datetime] = None) -> int:
        """Users not deleted, optionally only those created after ``since``."""
        pass


class SQLAlchemyUserRepository(UserRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int, include_deleted: bool = False) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        if not include_deleted:
            stmt = stmt.where(User.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        try:
            async with self.session.begin_nested():
                self.session.add(user)
        except IntegrityError as exc:
            raise DuplicateEntry(f"email {user.email} already registered") from exc
        await self.session.refresh(user, ["skills_offered", "skills_wanted"])
        return user

    async def save(self, user: User) -> User:
        await self.session.flush()
        return user

    async def search(
        self,
        name_contains: Optional[str] = None,
        skill_ids: Optional[Iterable[int]] = None,
        location: Optional[str] = None,
        is_public: Optional[bool] = None,
        min_rating: Optional[float] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[User]:
        stmt = select(User).where(User.deleted_at.is_(None))

        if name_contains:
            stmt = stmt.where(
                func.lower(User.name).contains(name_contains.lower(), autoescape=True)
            )

        ids = set(skill_ids or ())
        if ids:
            # OR across selected skills and across offered / wanted.
            stmt = stmt.where(
                or_(
                    User.skills_offered.any(Skill.id.in_(ids)),
                    User.skills_wanted.any(Skill.id.in_(ids)),
                )
            )

        if location:
            stmt = stmt.where(
                func.lower(User.location).contains(location.lower(), autoescape=True)
            )

        if is_public is not None:
            stmt = stmt.where(User.is_public.is_(is_public))

        if min_rating is not None:
            # Users without ratings count as 0, as on the profile page.
            average = (
                select(func.coalesce(func.avg(Rating.score), 0))
                .where(Rating.user_id == User.id)
                .scalar_subquery()
            )
            stmt = stmt.where(average >= min_rating)

        stmt = stmt.order_by(User.id).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_mutual(
        self, user_id: int, offered_ids: Iterable[int], wanted_ids: Iterable[int]
    ) -> List[User]:
        offered, wanted = set(offered_ids), set(wanted_ids)
        if not offered or not wanted:
            return []

        result = await self.session.execute(
            select(User)
            .where(
                and_(
                    User.id != user_id,
                    User.is_public.is_(True),
                    User.deleted_at.is_(None),
                    User.skills_wanted.any(Skill.id.in_(offered)),
                    User.skills_offered.any(Skill.id.in_(wanted)),
                )
            )
            .order_by(User.id)
        )
        return list(result.scalars().all())

    async def list_for_admin(
        self,
        search: Optional[str] = None,
        is_banned: Optional[bool] = None,
        role: Optional[UserRole] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        conditions = [User.deleted_at.is_(None)]
        if search:
            term = search.lower()
            conditions.append(
                or_(
                    func.lower(User.name).contains(term, autoescape=True),
                    func.lower(User.email).contains(term, autoescape=True),
                )
            )
        if is_banned is not None:
            conditions.append(User.is_banned.is_(is_banned))
        if role is not None:
            conditions.append(User.role == role)

        total = (
            await self.session.execute(select(func.count(User.id)).where(*conditions))
        ).scalar() or 0
        result = await self.session.execute(
            select(User)
            .where(*conditions)
            .order_by(desc(User.created_at), desc(User.id))
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total

    async def count(self, since: Optional[datetime] = None) -> int:
        stmt = select(func.count(User.id)).where(User.deleted_at.is_(None))
        if since is not None:
            stmt = stmt.where(User.created_at >= since)
        return (await self.session.execute(stmt)).scalar() or 0
