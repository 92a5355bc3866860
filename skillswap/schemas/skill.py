"""Skill Pydantic schemas."""

from typing import Optional

from pydantic import AliasChoices, Field

from skillswap.schemas.base import BaseSchema


class SkillOut(BaseSchema):
    skill_id: int = Field(validation_alias=AliasChoices("id", "skillId"))
    name: str
    description: Optional[str] = None
