"""
Users router — registration, profile settings, skill sets, browse.

Endpoints:
    POST   /users                               → register a profile
    GET    /users/search                        → browse the directory
    GET    /users/me                            → own profile
    PATCH  /users/me                            → update profile settings
    DELETE /users/me                            → soft-delete own account
    POST   /users/me/skills/{kind}/{skill_id}   → add an offered / wanted skill
    DELETE /users/me/skills/{kind}/{skill_id}   → remove it
    GET    /users/{user_id}                     → public profile
"""

import enum
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from skillswap.models.user import User
from skillswap.routers.auth import require_user
from skillswap.routers.deps import get_rating_service, get_search_service, get_user_service
from skillswap.schemas.user import ProfileUpdate, UserCreate, UserOut
from skillswap.services.ratings import RatingService
from skillswap.services.search import SearchCriteria, SearchService
from skillswap.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


class SkillKind(str, enum.Enum):
    OFFERED = "offered"
    WANTED = "wanted"


async def _with_rating(user: User, ratings: RatingService) -> UserOut:
    averages = await ratings.average_ratings([user.id])
    return UserOut.from_user(user, averages.get(user.id))


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    users: UserService = Depends(get_user_service),
):
    """Create the marketplace profile for an identity the provider already verified."""
    user = await users.register(payload.name, payload.email, payload.location)
    return UserOut.from_user(user)


@router.get("/search", response_model=List[UserOut])
async def search_users(
    name: Optional[str] = None,
    skill_ids: List[int] = Query(default=[]),
    location: Optional[str] = None,
    is_public: Optional[bool] = None,
    min_rating: Optional[float] = Query(default=None, ge=0, le=5),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    search: SearchService = Depends(get_search_service),
    ratings: RatingService = Depends(get_rating_service),
):
    """Browse users; selecting several skills widens the result."""
    criteria = SearchCriteria(
        name_contains=name,
        skill_ids=frozenset(skill_ids),
        location=location,
        is_public=is_public,
        min_rating=min_rating,
    )
    found = await search.search(criteria, limit=limit, offset=offset)
    averages = await ratings.average_ratings(u.id for u in found)
    return [UserOut.from_user(u, averages.get(u.id)) for u in found]


@router.get("/me", response_model=UserOut)
async def read_me(
    current_user: User = Depends(require_user),
    ratings: RatingService = Depends(get_rating_service),
):
    """Return the authenticated user's profile."""
    return await _with_rating(current_user, ratings)


@router.patch("/me", response_model=UserOut)
async def update_me(
    payload: ProfileUpdate,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
    ratings: RatingService = Depends(get_rating_service),
):
    user = await users.update_profile(current_user.id, **payload.model_dump(exclude_unset=True))
    return await _with_rating(user, ratings)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
):
    await users.soft_delete(current_user.id)


@router.post("/me/skills/{kind}/{skill_id}", response_model=UserOut)
async def add_skill(
    kind: SkillKind,
    skill_id: int,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
    ratings: RatingService = Depends(get_rating_service),
):
    if kind is SkillKind.OFFERED:
        user = await users.add_offered(current_user.id, skill_id)
    else:
        user = await users.add_wanted(current_user.id, skill_id)
    return await _with_rating(user, ratings)


@router.delete("/me/skills/{kind}/{skill_id}", response_model=UserOut)
async def remove_skill(
    kind: SkillKind,
    skill_id: int,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
    ratings: RatingService = Depends(get_rating_service),
):
    if kind is SkillKind.OFFERED:
        user = await users.remove_offered(current_user.id, skill_id)
    else:
        user = await users.remove_wanted(current_user.id, skill_id)
    return await _with_rating(user, ratings)


@router.get("/{user_id}", response_model=UserOut)
async def read_user(
    user_id: int,
    users: UserService = Depends(get_user_service),
    ratings: RatingService = Depends(get_rating_service),
):
    """Get a public user profile by ID."""
    return await _with_rating(await users.get_user(user_id), ratings)
