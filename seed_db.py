import asyncio
import logging

import skillswap.models  # noqa: F401
from skillswap.config import settings
from skillswap.database import Base, async_session, engine
from skillswap.logging_config import configure_logging
from skillswap.repositories import SQLAlchemyStore
from skillswap.services.catalog import SkillCatalog
from skillswap.services.users import UserService

logger = logging.getLogger("seed_db")

# name, email, location, offers, wants
DEMO_USERS = [
    ("Sarah Johnson", "sarah.johnson@email.com", "San Francisco, CA", ["JavaScript", "Python"], ["Cooking", "Spanish"]),
    ("Michael Chen", "michael.chen@email.com", "New York, NY", ["Graphic Design", "Photography"], ["JavaScript", "Guitar"]),
    ("Emily Rodriguez", "emily.rodriguez@email.com", "Austin, TX", ["Spanish", "Cooking"], ["Python", "Yoga"]),
    ("David Kim", "david.kim@email.com", "Seattle, WA", ["Guitar", "Woodworking"], ["Photography", "Chess"]),
    ("Lisa Thompson", "lisa.thompson@email.com", "Denver, CO", ["Yoga", "Chess"], ["Graphic Design", "Woodworking"]),
]


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        store = SQLAlchemyStore(session)
        await SkillCatalog(store).seed_defaults()
        skills = {s.name: s.id for s in await store.skills.list_all()}
        users = UserService(store)

        created = 0
        for name, email, location, offers, wants in DEMO_USERS:
            if await store.users.get_by_email(email):
                continue
            user = await users.register(name, email, location)
            for skill in offers:
                await users.add_offered(user.id, skills[skill])
            for skill in wants:
                await users.add_wanted(user.id, skills[skill])
            created += 1

    await engine.dispose()
    logger.info("Seeded %d demo users into %s", created, settings.DATABASE_URL)


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(async_main())
