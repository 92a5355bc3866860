"""Admin moderation Pydantic schemas."""

from typing import List, Optional

from pydantic import Field

from skillswap.schemas.base import BaseSchema, InputSchema
from skillswap.schemas.swap import SwapRequestOut
from skillswap.schemas.user import UserOut


class SwapCancelByAdmin(InputSchema):
    reason: str = Field(min_length=1, max_length=500)


class AdminUserPage(BaseSchema):
    users: List[UserOut]
    total: int


class AdminSwapPage(BaseSchema):
    swaps: List[SwapRequestOut]
    total: int


class PlatformStatsOut(BaseSchema):
    total_users: int
    active_users: int
    total_swaps: int
    accepted_swaps: int
    pending_swaps: int
    total_skills: int
    total_ratings: int
    average_rating: Optional[float] = None
    new_users_this_month: int
    swaps_this_month: int
