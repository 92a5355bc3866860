"""Swap request Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from skillswap.models.swap_request import SwapStatus
from skillswap.schemas.base import BaseSchema, InputSchema, TimestampedSchema
from skillswap.schemas.skill import SkillOut
from skillswap.schemas.user import UserOut


class SwapRequestCreate(InputSchema):
    responder_id: int
    offered_skill_id: int
    wanted_skill_id: int


class SwapRequestOut(TimestampedSchema):
    swap_id: int = Field(validation_alias=AliasChoices("id", "swapId"))
    requester_id: int
    responder_id: int
    offered_skill: SkillOut
    wanted_skill: SkillOut
    status: SwapStatus
    completed_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None
    deleted_at: Optional[datetime] = None


class SwapOverviewOut(BaseSchema):
    sent: List[SwapRequestOut]
    received: List[SwapRequestOut]


class SwapMatchOut(BaseSchema):
    user: UserOut
    offered_skill: SkillOut
    wanted_skill: SkillOut
