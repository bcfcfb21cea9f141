"""Pytest configuration and shared fixtures.

Usage Guide:
- For repository/ORM tests: use db_session (fresh in-memory SQLite per test)
- For GitHub payloads: import dict factories from tests.factories
- For orchestrator tests: use make_fake_client from tests.factories
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from github_org_sync.config import Settings
from github_org_sync.db.models import Base

# -----------------------------------------------------------------------------
# Test Timeline Constants
# -----------------------------------------------------------------------------
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)  # Account connected
JAN_15_ISO = "2024-01-15T10:00:00Z"


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create an async session bound to the test engine.

    Collection writes commit as they go, so isolation comes from the
    per-test engine rather than a rollback.
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only and no pacing delay."""
    s = Settings(_env_file=None)
    s.fetch.inter_page_delay_ms = 0
    return s

