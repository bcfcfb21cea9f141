"""Async SQLAlchemy engine and session management.

Engines are cached per database URL, so pointing Settings.database_url
somewhere else (another file, a test database) gets its own engine
without resetting any state.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from github_org_sync.config import get_settings
from github_org_sync.db.models import Base

_engines: dict[str, AsyncEngine] = {}


def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Get the engine for a database URL (defaults to Settings.database_url)."""
    url = database_url or get_settings().database_url
    engine = _engines.get(url)
    if engine is None:
        # NullPool: each session opens its own SQLite connection
        engine = create_async_engine(url, poolclass=pool.NullPool)
        _engines[url] = engine
    return engine


@asynccontextmanager
async def get_session(database_url: str | None = None) -> AsyncGenerator[AsyncSession, None]:
    """Open a session that commits on clean exit.

    If the block raises, only work not yet committed is rolled back.
    Collection writes commit per batch, so those survive.

    Usage:
        async with get_session() as session:
            result = await ResyncOrchestrator(
                IntegrationRepository(session), CollectionRepository(session)
            ).resync()
    """
    sessions = async_sessionmaker(
        get_engine(database_url),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with sessions() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(database_url: str | None = None) -> None:
    """Create the integration and collection tables if they don't exist."""
    async with get_engine(database_url).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
