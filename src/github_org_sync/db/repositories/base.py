"""Base repository pattern implementation for async SQLAlchemy.

Provides common session handling and helpers shared across all
repositories.
"""

from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from github_org_sync.db.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Base repository with common async session handling.

    The session is owned by the caller; repositories never open or close
    one themselves.

    Usage:
        class IntegrationRepository(BaseRepository[GitHubIntegration]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, GitHubIntegration)
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[ModelT],
    ) -> None:
        """Initialize the repository with a session.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The SQLAlchemy model class this repository manages
        """
        self._session = session
        self._model_class = model_class

    def add(self, entity: ModelT) -> ModelT:
        """Add an entity to the session (does not flush)."""
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        """Flush pending changes to the database."""
        await self._session.flush()

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._session.commit()

    async def count(self) -> int:
        """Count total entities of this type."""
        stmt = select(func.count()).select_from(self._model_class)
        result = await self._session.execute(stmt)
        return result.scalar() or 0
