"""Ratings router – rate a swap partner, edit or withdraw the rating, read ratings."""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from skillswap.models.user import User
from skillswap.routers.auth import require_user
from skillswap.routers.deps import get_rating_service, get_user_service
from skillswap.schemas.rating import RatingCreate, RatingOut, RatingStatsOut, RatingUpdate
from skillswap.services.ratings import RatingService
from skillswap.services.users import UserService

router = APIRouter(tags=["ratings"])


@router.post("/ratings", response_model=RatingOut, status_code=status.HTTP_201_CREATED)
async def create_rating(
    payload: RatingCreate,
    current_user: User = Depends(require_user),
    ratings: RatingService = Depends(get_rating_service),
):
    """Rate the other participant of an accepted swap."""
    return await ratings.rate(payload.swap_id, current_user.id, payload.score, payload.comment)


@router.patch("/ratings/{rating_id}", response_model=RatingOut)
async def update_rating(
    rating_id: int,
    payload: RatingUpdate,
    current_user: User = Depends(require_user),
    ratings: RatingService = Depends(get_rating_service),
):
    return await ratings.update_rating(rating_id, current_user.id, payload.score, payload.comment)


@router.delete("/ratings/{rating_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rating(
    rating_id: int,
    current_user: User = Depends(require_user),
    ratings: RatingService = Depends(get_rating_service),
):
    await ratings.delete_rating(rating_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/swaps/{swap_id}/ratings", response_model=List[RatingOut])
async def swap_ratings(
    swap_id: int,
    current_user: User = Depends(require_user),
    ratings: RatingService = Depends(get_rating_service),
):
    return await ratings.ratings_for_swap(swap_id)


@router.get("/users/{user_id}/ratings", response_model=List[RatingOut])
async def user_ratings(
    user_id: int,
    users: UserService = Depends(get_user_service),
    ratings: RatingService = Depends(get_rating_service),
):
    await users.get_user(user_id)
    return await ratings.ratings_for_user(user_id)


@router.get("/users/{user_id}/ratings/stats", response_model=RatingStatsOut)
async def user_rating_stats(
    user_id: int,
    users: UserService = Depends(get_user_service),
    ratings: RatingService = Depends(get_rating_service),
):
    await users.get_user(user_id)
    return await ratings.rating_stats(user_id)
