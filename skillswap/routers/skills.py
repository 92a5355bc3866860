"""Skills router – read-only catalog."""

from typing import List

from fastapi import APIRouter, Depends

from skillswap.routers.deps import get_catalog
from skillswap.schemas.skill import SkillOut
from skillswap.services.catalog import SkillCatalog

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=List[SkillOut])
async def list_skills(catalog: SkillCatalog = Depends(get_catalog)):
    """Every exchangeable skill, in catalog order."""
    return await catalog.list_skills()


@router.get("/{skill_id}", response_model=SkillOut)
async def read_skill(skill_id: int, catalog: SkillCatalog = Depends(get_catalog)):
    return await catalog.get_skill_by_id(skill_id)
