"""Rating Pydantic schemas."""

from typing import Dict, Optional

from pydantic import AliasChoices, Field

from skillswap.schemas.base import BaseSchema, InputSchema, TimestampedSchema


class RatingCreate(InputSchema):
    swap_id: int
    score: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class RatingUpdate(InputSchema):
    score: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class RatingOut(TimestampedSchema):
    rating_id: int = Field(validation_alias=AliasChoices("id", "ratingId"))
    user_id: int
    rated_by_id: int
    swap_id: int
    score: int
    comment: Optional[str] = None


class RatingStatsOut(BaseSchema):
    user_id: int
    total_ratings: int
    average_rating: Optional[float] = None
    histogram: Dict[int, int]
