"""FastAPI dependencies that wire services onto the request's session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.database import get_db
from skillswap.repositories import SQLAlchemyStore, Store
from skillswap.services.admin import AdminService
from skillswap.services.availability import AvailabilityService
from skillswap.services.catalog import SkillCatalog
from skillswap.services.messaging import MessagingService
from skillswap.services.notifications import NotificationService
from skillswap.services.ratings import RatingService
from skillswap.services.search import SearchService
from skillswap.services.swaps import SwapService
from skillswap.services.users import UserService


def get_store(db: AsyncSession = Depends(get_db)) -> Store:
    return SQLAlchemyStore(db)


def get_notification_service(store: Store = Depends(get_store)) -> NotificationService:
    return NotificationService(store)


def get_messaging_service(
    store: Store = Depends(get_store),
    notifications: NotificationService = Depends(get_notification_service),
) -> MessagingService:
    return MessagingService(store, notifications)


def get_swap_service(
    store: Store = Depends(get_store),
    notifications: NotificationService = Depends(get_notification_service),
    messaging: MessagingService = Depends(get_messaging_service),
) -> SwapService:
    return SwapService(store, notifications, messaging)


def get_catalog(store: Store = Depends(get_store)) -> SkillCatalog:
    return SkillCatalog(store)


def get_search_service(store: Store = Depends(get_store)) -> SearchService:
    return SearchService(store)


def get_rating_service(store: Store = Depends(get_store)) -> RatingService:
    return RatingService(store)


def get_user_service(store: Store = Depends(get_store)) -> UserService:
    return UserService(store)


def get_admin_service(
    store: Store = Depends(get_store),
    swaps: SwapService = Depends(get_swap_service),
) -> AdminService:
    return AdminService(store, swaps)


def get_availability_service(store: Store = Depends(get_store)) -> AvailabilityService:
    return AvailabilityService(store)
