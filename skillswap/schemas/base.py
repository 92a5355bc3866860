"""Shared pydantic bases for the JSON wire contract (camelCase field names)."""

from datetime import datetime
from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Response model: read from ORM attributes, serialized as camelCase.

    camelCase keys are accepted on input too, since FastAPI re-validates a
    returned model from its aliased dump.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=AliasGenerator(validation_alias=to_camel, serialization_alias=to_camel),
    )


class TimestampedSchema(BaseSchema):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InputSchema(BaseModel):
    """Request body: accepts camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
