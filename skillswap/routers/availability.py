"""
Availability router — weekly time windows and shared free time.

Endpoints:
    POST   /availability                      → add a slot
    GET    /availability                      → my slots
    GET    /availability/common/{other_id}    → windows I share with another user
    GET    /availability/{slot_id}            → one of my slots
    PUT    /availability/{slot_id}            → replace a slot
    DELETE /availability/{slot_id}            → remove a slot
    GET    /users/{user_id}/availability      → someone's slots, optionally one day / window
"""

from datetime import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from skillswap.errors import InvalidAvailability
from skillswap.models.user import User
from skillswap.routers.auth import require_user
from skillswap.routers.deps import get_availability_service, get_user_service
from skillswap.schemas.availability import AvailabilitySlotIn, AvailabilitySlotOut, CommonSlotOut
from skillswap.services.availability import AvailabilityService
from skillswap.services.users import UserService

router = APIRouter(tags=["availability"])


@router.post(
    "/availability", response_model=AvailabilitySlotOut, status_code=status.HTTP_201_CREATED
)
async def create_slot(
    payload: AvailabilitySlotIn,
    current_user: User = Depends(require_user),
    availability: AvailabilityService = Depends(get_availability_service),
):
    return await availability.create_slot(
        current_user.id, payload.label, payload.day_bitmask, payload.start_time, payload.end_time
    )


@router.get("/availability", response_model=List[AvailabilitySlotOut])
async def my_slots(
    current_user: User = Depends(require_user),
    availability: AvailabilityService = Depends(get_availability_service),
):
    return await availability.list_slots(current_user.id)


@router.get("/availability/common/{other_id}", response_model=List[CommonSlotOut])
async def common_slots(
    other_id: int,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
    availability: AvailabilityService = Depends(get_availability_service),
):
    await users.get_user(other_id)
    return await availability.common_availability(current_user.id, other_id)


@router.get("/availability/{slot_id}", response_model=AvailabilitySlotOut)
async def read_slot(
    slot_id: int,
    current_user: User = Depends(require_user),
    availability: AvailabilityService = Depends(get_availability_service),
):
    return await availability.get_slot(slot_id, current_user.id)


@router.put("/availability/{slot_id}", response_model=AvailabilitySlotOut)
async def update_slot(
    slot_id: int,
    payload: AvailabilitySlotIn,
    current_user: User = Depends(require_user),
    availability: AvailabilityService = Depends(get_availability_service),
):
    return await availability.update_slot(
        slot_id,
        current_user.id,
        payload.label,
        payload.day_bitmask,
        payload.start_time,
        payload.end_time,
    )


@router.delete("/availability/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_slot(
    slot_id: int,
    current_user: User = Depends(require_user),
    availability: AvailabilityService = Depends(get_availability_service),
):
    await availability.delete_slot(slot_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{user_id}/availability", response_model=List[AvailabilitySlotOut])
async def user_slots(
    user_id: int,
    day: Optional[int] = Query(default=None, ge=1, le=7),
    start: Optional[time] = None,
    end: Optional[time] = None,
    users: UserService = Depends(get_user_service),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """``day`` (Monday = 1) with ``start`` and ``end`` narrows to slots touching that window."""
    await users.get_user(user_id)
    if day is None:
        return await availability.list_slots(user_id)
    if start is None or end is None:
        raise InvalidAvailability("start and end are required together with day.")
    return await availability.slots_on(user_id, day, start, end)
