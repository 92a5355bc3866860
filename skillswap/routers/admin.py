"""
Admin router — user moderation, swap oversight and platform statistics.

Endpoints:
    GET  /admin/users                    → paginated user list
    POST /admin/users/{user_id}/ban      → ban a non-admin user
    POST /admin/users/{user_id}/unban    → lift a ban
    DELETE /admin/users/{user_id}        → soft-delete a non-admin user
    POST /admin/users/{user_id}/promote  → grant the admin role
    POST /admin/users/{user_id}/demote   → revoke the admin role
    GET  /admin/swaps                    → every swap, filterable
    POST /admin/swaps/{swap_id}/cancel   → cancel a pending swap with a reason
    GET  /admin/stats                    → platform totals
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from skillswap.models.swap_request import SwapStatus
from skillswap.models.user import User, UserRole
from skillswap.routers.auth import require_admin
from skillswap.routers.deps import get_admin_service
from skillswap.schemas.admin import (
    AdminSwapPage,
    AdminUserPage,
    PlatformStatsOut,
    SwapCancelByAdmin,
)
from skillswap.schemas.swap import SwapRequestOut
from skillswap.schemas.user import UserOut
from skillswap.services.admin import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=AdminUserPage)
async def list_users(
    search: Optional[str] = None,
    is_banned: Optional[bool] = None,
    role: Optional[UserRole] = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    users, total = await service.list_users(admin.id, search, is_banned, role, limit, offset)
    return {"users": users, "total": total}


@router.post("/users/{user_id}/ban", response_model=UserOut)
async def ban_user(
    user_id: int,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.ban_user(admin.id, user_id)


@router.post("/users/{user_id}/unban", response_model=UserOut)
async def unban_user(
    user_id: int,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.unban_user(admin.id, user_id)


@router.delete("/users/{user_id}", response_model=UserOut)
async def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.delete_user(admin.id, user_id)


@router.post("/users/{user_id}/promote", response_model=UserOut)
async def promote_user(
    user_id: int,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.promote(admin.id, user_id)


@router.post("/users/{user_id}/demote", response_model=UserOut)
async def demote_user(
    user_id: int,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.demote(admin.id, user_id)


@router.get("/swaps", response_model=AdminSwapPage)
async def list_swaps(
    status_filter: Optional[SwapStatus] = Query(default=None, alias="status"),
    requester_id: Optional[int] = None,
    responder_id: Optional[int] = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    swaps, total = await service.list_swaps(
        admin.id, status_filter, requester_id, responder_id, limit, offset
    )
    return {"swaps": swaps, "total": total}


@router.post("/swaps/{swap_id}/cancel", response_model=SwapRequestOut)
async def cancel_swap(
    swap_id: int,
    payload: SwapCancelByAdmin,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Cancel a pending swap; both participants are notified with the reason."""
    return await service.cancel_swap(admin.id, swap_id, payload.reason)


@router.get("/stats", response_model=PlatformStatsOut)
async def platform_stats(
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.platform_stats(admin.id)
