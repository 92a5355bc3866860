"""Message Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from skillswap.schemas.base import BaseSchema, InputSchema, TimestampedSchema


class MessageCreate(InputSchema):
    text: Optional[str] = Field(default=None, max_length=4000)
    image: Optional[str] = Field(default=None, max_length=500)


class MessageOut(TimestampedSchema):
    message_id: int = Field(validation_alias=AliasChoices("id", "messageId"))
    sender_id: int
    receiver_id: int
    text: Optional[str] = None
    image: Optional[str] = None


class ChannelOut(BaseSchema):
    channel_id: int
    other_user_id: int
    swap_id: Optional[int] = None
    created_at: datetime
