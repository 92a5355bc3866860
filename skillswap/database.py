"""
SkillSwap – Async SQLAlchemy engine, session, and declarative base.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from skillswap.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with the driver tweaks each backend needs."""
    engine_kwargs = {"echo": echo, "future": True}

    # PgBouncer (transaction mode) does not support prepared statement caching.
    if "postgresql" in url:
        engine_kwargs["connect_args"] = {"statement_cache_size": 0}
    elif url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"timeout": 30}

    engine = create_async_engine(url, **engine_kwargs)
    if url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _register_sqlite_functions)
    return engine


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record):
    # SQLite's built-in lower() only folds ASCII letters.
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


# ── Engine ──
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# ── Session factory ──
async_session = build_session_factory(engine)


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# ── Dependency for FastAPI routes ──
async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async database session, auto-closed on exit."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def utcnow() -> datetime:
    """Timezone-aware 'now' used for Python-side timestamp defaults."""
    return datetime.now(timezone.utc)
