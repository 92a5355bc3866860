"""
SkillSwap — FastAPI application entry-point.

Run with:
    uvicorn skillswap.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

import skillswap.models  # noqa: F401  (register every table on Base.metadata)
from skillswap import __version__
from skillswap.config import settings
from skillswap.database import Base, async_session, engine
from skillswap.errors import SkillSwapError
from skillswap.logging_config import configure_logging
from skillswap.repositories import SQLAlchemyStore
from skillswap.services.catalog import SkillCatalog

# ── Import routers ──
from skillswap.routers import (
    admin,
    availability,
    messages,
    notifications,
    ratings,
    skills,
    swaps,
    users,
)

logger = logging.getLogger(__name__)


# ── Lifespan: create tables and seed the catalog on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.SEED_SKILL_CATALOG:
        async with async_session() as session:
            await SkillCatalog(SQLAlchemyStore(session)).seed_defaults()
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Skill-exchange marketplace — offer what you know, learn what you want.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))


# ── Domain errors → JSON ──
@app.exception_handler(SkillSwapError)
async def skillswap_error_handler(request: Request, exc: SkillSwapError):
    logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ── Register API routers ──
app.include_router(skills.router)
app.include_router(users.router)
app.include_router(swaps.router)
app.include_router(notifications.router)
app.include_router(messages.router)
app.include_router(ratings.router)
app.include_router(availability.router)
app.include_router(admin.router)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "version": __version__}


if settings.ENVIRONMENT != "production":
    from skillswap.models.user import User
    from skillswap.routers.auth import COOKIE_KEY, create_access_token
    from skillswap.routers.deps import get_user_service
    from skillswap.services.users import UserService

    @app.post("/dev/token/{user_id}", tags=["dev"])
    async def dev_token(user_id: int, users: UserService = Depends(get_user_service)):
        """Stand-in for the identity provider while developing locally."""
        user: User = await users.get_user(user_id)
        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        response = JSONResponse({"access_token": token, "token_type": "bearer"})
        response.set_cookie(
            key=COOKIE_KEY,
            value=token,
            httponly=True,
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            samesite="lax",
        )
        return response
