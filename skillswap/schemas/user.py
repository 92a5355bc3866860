"""User Pydantic schemas — registration, profile settings, public profile."""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, EmailStr, Field, field_validator

from skillswap.models.user import User, UserRole
from skillswap.schemas.base import InputSchema, TimestampedSchema
from skillswap.schemas.skill import SkillOut


class UserCreate(InputSchema):
    """Fields submitted on the registration form."""
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    location: Optional[str] = Field(default=None, max_length=200)


class ProfileUpdate(InputSchema):
    """Fields editable from the settings page; omitted fields stay unchanged."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    photo_url: Optional[str] = Field(default=None, max_length=500)
    is_public: Optional[bool] = None

    @field_validator("name", "is_public")
    @classmethod
    def not_null(cls, value):
        # Only location and photo_url can be cleared.
        if value is None:
            raise ValueError("may not be null")
        return value


class UserOut(TimestampedSchema):
    """Public user representation returned by the API."""
    user_id: int = Field(validation_alias=AliasChoices("id", "userId"))
    name: str
    email: str
    role: UserRole
    rating: Optional[float] = None
    location: Optional[str] = None
    photo_url: Optional[str] = None
    is_public: bool
    is_banned: bool = False
    deleted_at: Optional[datetime] = None
    skills_offered: List[SkillOut] = []
    skills_wanted: List[SkillOut] = []

    @classmethod
    def from_user(cls, user: User, rating: Optional[float] = None) -> "UserOut":
        out = cls.model_validate(user)
        out.rating = rating
        return out
