"""Notifications router — fetch, stats, read, mark-all-read, and delete."""

from fastapi import APIRouter, Depends, Query, Response, status

from skillswap.models.user import User
from skillswap.routers.auth import require_user
from skillswap.routers.deps import get_notification_service
from skillswap.schemas.notification import (
    NotificationListOut,
    NotificationOut,
    NotificationStatsOut,
)
from skillswap.services.notifications import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListOut)
async def get_notifications(
    unread_only: bool = False,
    limit: int = Query(default=20, ge=1, le=100),
    current_user: User = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Return the latest notifications + unread count for the current user."""
    return {
        "unread_count": await notifications.unread_count(current_user.id),
        "notifications": await notifications.list_for_user(current_user.id, unread_only, limit),
    }


@router.get("/stats", response_model=NotificationStatsOut)
async def notification_stats(
    current_user: User = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    return await notifications.stats(current_user.id)


@router.post("/read-all")
async def mark_all_read(
    current_user: User = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Mark all notifications as read for the current user."""
    updated = await notifications.mark_all_read(current_user.id)
    return {"ok": True, "updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(
    notification_id: int,
    current_user: User = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Mark a single notification as read."""
    return await notifications.mark_read(notification_id, current_user.id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    current_user: User = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.delete(notification_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
