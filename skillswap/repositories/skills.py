"""
Skill catalog repository.

The catalog is reference data: rows are inserted by seeding and never
mutated afterwards.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.models.skill import Skill


class SkillRepository(ABC):
    """Data access contract for the skill catalog."""

    @abstractmethod
    async def get(self, skill_id: int) -> Optional[Skill]:
        pass

    @abstractmethod
    async def get_many(self, skill_ids: Iterable[int]) -> Dict[int, Skill]:
        """Return the known skills keyed by id; unknown ids are omitted."""
        pass

    @abstractmethod
    async def list_all(self) -> List[Skill]:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def add_many(self, skills: List[Skill]) -> List[Skill]:
        pass


class SQLAlchemySkillRepository(SkillRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, skill_id: int) -> Optional[Skill]:
        return await self.session.get(Skill, skill_id)

    async def get_many(self, skill_ids: Iterable[int]) -> Dict[int, Skill]:
        ids = set(skill_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(Skill).where(Skill.id.in_(ids)))
        return {s.id: s for s in result.scalars().all()}

    async def list_all(self) -> List[Skill]:
        result = await self.session.execute(select(Skill).order_by(Skill.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        return (await self.session.execute(select(func.count(Skill.id)))).scalar() or 0

    async def add_many(self, skills: List[Skill]) -> List[Skill]:
        self.session.add_all(skills)
        await self.session.flush()
        return skills
