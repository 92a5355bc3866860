"""
Swaps router — create swap requests and move them through their lifecycle.

Endpoints:
    POST /swaps                    → create a pending request
    GET  /swaps                    → my requests (filter by status / direction)
    GET  /swaps/overview           → sent + received
    GET  /swaps/history            → terminal requests
    GET  /swaps/matches            → mutual skill matches for me
    GET  /swaps/{swap_id}          → one request (participants / admins)
    POST /swaps/{swap_id}/accept   → responder accepts
    POST /swaps/{swap_id}/reject   → responder rejects
    POST /swaps/{swap_id}/cancel   → requester cancels
    POST /swaps/{swap_id}/complete → either participant marks the exchange done
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from skillswap.models.swap_request import SwapStatus
from skillswap.models.user import User
from skillswap.routers.auth import require_user
from skillswap.routers.deps import get_rating_service, get_search_service, get_swap_service
from skillswap.schemas.skill import SkillOut
from skillswap.schemas.swap import SwapMatchOut, SwapOverviewOut, SwapRequestCreate, SwapRequestOut
from skillswap.schemas.user import UserOut
from skillswap.services.ratings import RatingService
from skillswap.services.search import SearchService
from skillswap.services.swaps import SwapRole, SwapService

router = APIRouter(prefix="/swaps", tags=["swaps"])


@router.post("", response_model=SwapRequestOut, status_code=status.HTTP_201_CREATED)
async def create_swap(
    payload: SwapRequestCreate,
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    """Offer one of my skills in exchange for one of the responder's."""
    return await swaps.create(
        requester_id=current_user.id,
        responder_id=payload.responder_id,
        offered_skill_id=payload.offered_skill_id,
        wanted_skill_id=payload.wanted_skill_id,
    )


@router.get("", response_model=List[SwapRequestOut])
async def list_swaps(
    status_filter: Optional[SwapStatus] = Query(default=None, alias="status"),
    direction: Optional[SwapRole] = None,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    """``direction=requester`` lists sent requests, ``responder`` received ones."""
    return await swaps.list_for_user(
        current_user.id, status=status_filter, direction=direction, limit=limit, offset=offset
    )


@router.get("/overview", response_model=SwapOverviewOut)
async def swap_overview(
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.overview(current_user.id)


@router.get("/history", response_model=List[SwapRequestOut])
async def swap_history(
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.history(current_user.id)


@router.get("/matches", response_model=List[SwapMatchOut])
async def swap_matches(
    current_user: User = Depends(require_user),
    search: SearchService = Depends(get_search_service),
    ratings: RatingService = Depends(get_rating_service),
):
    """Users who want what I offer and offer what I want."""
    matches = await search.find_matches(current_user.id)
    averages = await ratings.average_ratings({m.user.id for m in matches})
    return [
        SwapMatchOut(
            user=UserOut.from_user(m.user, averages.get(m.user.id)),
            offered_skill=SkillOut.model_validate(m.offered_skill),
            wanted_skill=SkillOut.model_validate(m.wanted_skill),
        )
        for m in matches
    ]


@router.get("/{swap_id}", response_model=SwapRequestOut)
async def read_swap(
    swap_id: int,
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.get(swap_id, current_user)


@router.post("/{swap_id}/accept", response_model=SwapRequestOut)
async def accept_swap(
    swap_id: int,
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.accept(swap_id, current_user.id)


@router.post("/{swap_id}/reject", response_model=SwapRequestOut)
async def reject_swap(
    swap_id: int,
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.reject(swap_id, current_user.id)


@router.post("/{swap_id}/cancel", response_model=SwapRequestOut)
async def cancel_swap(
    swap_id: int,
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.cancel(swap_id, current_user.id)


@router.post("/{swap_id}/complete", response_model=SwapRequestOut)
async def complete_swap(
    swap_id: int,
    current_user: User = Depends(require_user),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.complete(swap_id, current_user.id)
