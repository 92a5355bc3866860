"""
Messages router — direct messages between swap partners.

A conversation exists once a swap between the two users has been accepted.
Real-time delivery is left to the messaging transport.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from skillswap.models.user import User
from skillswap.routers.auth import require_user
from skillswap.routers.deps import get_messaging_service
from skillswap.schemas.message import ChannelOut, MessageCreate, MessageOut
from skillswap.services.messaging import MessagingService

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/channels", response_model=List[ChannelOut])
async def list_channels(
    current_user: User = Depends(require_user),
    messaging: MessagingService = Depends(get_messaging_service),
):
    channels = await messaging.list_channels(current_user.id)
    return [
        ChannelOut(
            channel_id=c.id,
            other_user_id=c.other_user(current_user.id),
            swap_id=c.swap_id,
            created_at=c.created_at,
        )
        for c in channels
    ]


@router.get("/{other_user_id}", response_model=List[MessageOut])
async def get_conversation(
    other_user_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    current_user: User = Depends(require_user),
    messaging: MessagingService = Depends(get_messaging_service),
):
    """The latest messages with ``other_user_id``, oldest first."""
    return await messaging.conversation(current_user.id, other_user_id, limit)


@router.post("/{other_user_id}", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    other_user_id: int,
    payload: MessageCreate,
    current_user: User = Depends(require_user),
    messaging: MessagingService = Depends(get_messaging_service),
):
    return await messaging.send_message(
        current_user.id, other_user_id, text=payload.text, image=payload.image
    )
