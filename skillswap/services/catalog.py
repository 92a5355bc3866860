"""Skill catalog: the authoritative list of exchangeable skills."""

import logging
from typing import List, Tuple

from skillswap.errors import NotFound
from skillswap.models.skill import Skill
from skillswap.repositories import Store

logger = logging.getLogger(__name__)

DEFAULT_SKILLS: List[Tuple[str, str]] = [
    ("JavaScript", "Modern JavaScript programming and web development"),
    ("Python", "Python programming for data science and automation"),
    ("Graphic Design", "Adobe Creative Suite and digital design"),
    ("Cooking", "International cuisine and culinary techniques"),
    ("Photography", "Digital and film photography techniques"),
    ("Guitar", "Acoustic and electric guitar lessons"),
    ("Spanish", "Spanish language conversation and grammar"),
    ("Yoga", "Vinyasa and Hatha yoga instruction"),
    ("Woodworking", "Furniture making and wood crafting"),
    ("Chess", "Chess strategy and advanced techniques"),
]


class SkillCatalog:

    def __init__(self, store: Store):
        self.store = store

    async def get_skill_by_id(self, skill_id: int) -> Skill:
        skill = await self.store.skills.get(skill_id)
        if skill is None:
            raise NotFound(f"Skill {skill_id} not found.")
        return skill

    async def list_skills(self) -> List[Skill]:
        return await self.store.skills.list_all()

    async def seed_defaults(self) -> int:
        """Insert the default catalog when the table is empty."""
        if await self.store.skills.count():
            return 0
        skills = [Skill(name=name, description=description) for name, description in DEFAULT_SKILLS]
        await self.store.skills.add_many(skills)
        await self.store.commit()
        logger.info("Seeded skill catalog with %d skills", len(skills))
        return len(skills)
