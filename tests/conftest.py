import os
import tempfile

# The application engine is built at import time, so point it at a scratch
# database before anything from skillswap is imported.
_DB_DIR = tempfile.mkdtemp(prefix="skillswap-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/api.db"
os.environ["EMAIL_NOTIFICATIONS"] = "false"
os.environ.setdefault("ENVIRONMENT", "testing")

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

import skillswap.models  # noqa: F401
from skillswap.database import Base, build_engine, build_session_factory
from skillswap.models.user import UserRole
from skillswap.repositories import SQLAlchemyStore
from skillswap.services.admin import AdminService
from skillswap.services.availability import AvailabilityService
from skillswap.services.catalog import SkillCatalog
from skillswap.services.locks import KeyedLocks
from skillswap.services.messaging import MessagingService
from skillswap.services.notifications import NotificationService
from skillswap.services.ratings import RatingService
from skillswap.services.search import SearchService
from skillswap.services.swaps import SwapService
from skillswap.services.users import UserService


@dataclass
class Services:
    store: SQLAlchemyStore
    catalog: SkillCatalog
    users: UserService
    notifications: NotificationService
    messaging: MessagingService
    swaps: SwapService
    search: SearchService
    ratings: RatingService
    availability: AvailabilityService
    admin: AdminService


class Harness:
    """A private SQLite database plus service wiring for one test."""

    def __init__(self, url: str):
        self.url = url
        self.engine = None
        self.sessions = None
        self.locks = KeyedLocks()
        self.skill_ids = {}

    @asynccontextmanager
    async def running(self):
        self.engine = build_engine(self.url)
        self.sessions = build_session_factory(self.engine)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with self.services() as s:
            await s.catalog.seed_defaults()
            self.skill_ids = {skill.name: skill.id for skill in await s.catalog.list_skills()}
        try:
            yield self
        finally:
            await self.engine.dispose()

    @asynccontextmanager
    async def services(self, **swap_options):
        async with self.sessions() as session:
            store = SQLAlchemyStore(session)
            notifications = NotificationService(store, email_enabled=False)
            messaging = MessagingService(store, notifications)
            swaps = SwapService(store, notifications, messaging, locks=self.locks, **swap_options)
            yield Services(
                store=store,
                catalog=SkillCatalog(store),
                users=UserService(store),
                notifications=notifications,
                messaging=messaging,
                swaps=swaps,
                search=SearchService(store),
                ratings=RatingService(store),
                availability=AvailabilityService(store),
                admin=AdminService(store, swaps),
            )

    def skill(self, name: str) -> int:
        return self.skill_ids[name]

    async def make_user(
        self, name, offers=(), wants=(), location=None, is_public=True, role=UserRole.USER
    ) -> int:
        async with self.services() as s:
            email = name.lower().replace(" ", ".") + "@example.com"
            user = await s.users.register(name, email, location, role=role)
            for skill in offers:
                await s.users.add_offered(user.id, self.skill(skill))
            for skill in wants:
                await s.users.add_wanted(user.id, self.skill(skill))
            if not is_public:
                await s.users.update_profile(user.id, is_public=False)
            return user.id


@pytest.fixture
def harness(tmp_path):
    return Harness(f"sqlite+aiosqlite:///{tmp_path / 'skillswap.db'}")


@pytest.fixture
def client():
    from skillswap.database import engine
    from skillswap.main import app
    from skillswap.services.locks import swap_locks

    async def reset():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()

    asyncio.run(reset())
    with TestClient(app) as test_client:
        yield test_client
    assert len(swap_locks) == 0
