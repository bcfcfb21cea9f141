"""Repository for the single-slot GitHub integration record."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from github_org_sync.db.models import INTEGRATION_SLOT, GitHubIntegration

from .base import BaseRepository


class IntegrationRepository(BaseRepository[GitHubIntegration]):
    """Repository for the connected GitHub account.

    The record lives at a fixed primary key, so reads and writes always
    address the same row and a second integration cannot be created.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, GitHubIntegration)

    async def get(self) -> GitHubIntegration | None:
        """Get the stored integration, or None if no account is connected."""
        return await self._session.get(GitHubIntegration, INTEGRATION_SLOT)

    async def upsert(
        self,
        access_token: str,
        user: dict[str, Any] | None,
        *,
        token_type: str | None = "bearer",
        scope: str | None = None,
        connected_at: datetime | None = None,
    ) -> GitHubIntegration:
        """Create the integration record or overwrite the existing one.

        Args:
            access_token: GitHub access token
            user: Authenticated user's profile as returned by GET /user
            token_type: Token type reported by GitHub
            scope: Granted scopes
            connected_at: Connection timestamp (defaults to now, UTC)

        Returns:
            The stored integration (flushed, not committed)
        """
        integration = await self.get()
        if integration is None:
            integration = GitHubIntegration(slot=INTEGRATION_SLOT)
            self.add(integration)

        integration.access_token = access_token
        integration.token_type = token_type
        integration.scope = scope
        integration.user = user
        integration.connected = True
        integration.connected_at = connected_at or datetime.now(UTC)

        await self.flush()
        return integration

    async def delete(self) -> bool:
        """Remove the integration record.

        Returns:
            True if a record was deleted, False if none existed
        """
        result = await self._session.execute(
            delete(GitHubIntegration).where(GitHubIntegration.slot == INTEGRATION_SLOT)
        )
        await self.flush()
        return (result.rowcount or 0) > 0
