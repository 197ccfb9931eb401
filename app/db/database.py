"""Database connection and session management."""
import logging
from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create the async engine for the table backend."""
    url = url or settings.database_url
    kwargs = {"echo": settings.database_echo}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=10, pool_pre_ping=True, pool_recycle=300)
    return create_async_engine(url, **kwargs)


engine = create_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that provides a request-scoped database session.

    Repositories commit their own writes; anything left pending when the request
    fails is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Create tables when running against a local SQLite database."""
    if settings.database_url.startswith("sqlite"):
        async with engine.connect() as conn:
            await conn.execute(text("PRAGMA journal_mode=WAL"))
            await conn.execute(text("PRAGMA busy_timeout=30000"))
            await conn.commit()

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        logger.info("Schema managed by alembic migrations; skipping create_all")


async def close_engine():
    """Dispose of the engine's connection pool."""
    await engine.dispose()
