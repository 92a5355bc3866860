"""Availability slot Pydantic schemas."""

from datetime import time
from typing import List

from pydantic import AliasChoices, Field

from skillswap.models.availability import ALL_DAYS
from skillswap.schemas.base import BaseSchema, InputSchema, TimestampedSchema


class AvailabilitySlotIn(InputSchema):
    """Create and update both replace every field of the slot."""
    label: str = Field(min_length=1, max_length=100)
    day_bitmask: int = Field(ge=1, le=ALL_DAYS)
    start_time: time
    end_time: time


class AvailabilitySlotOut(TimestampedSchema):
    slot_id: int = Field(validation_alias=AliasChoices("id", "slotId"))
    user_id: int
    label: str
    day_bitmask: int
    days: List[str]
    start_time: time
    end_time: time


class CommonSlotOut(BaseSchema):
    day: str
    start_time: time
    end_time: time
    duration_minutes: int
