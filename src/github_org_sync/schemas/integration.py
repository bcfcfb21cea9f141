"""Pydantic schemas for the GitHub integration record."""

from datetime import datetime
from typing import Any

from pydantic import Field

from github_org_sync.db.models import GitHubIntegration

from .base import SchemaBase


class IntegrationStatus(SchemaBase):
    """Connection status of the GitHub integration.

    The access token is deliberately not part of this schema.
    """

    connected: bool = Field(default=False, description="Whether an account is connected")
    connected_at: datetime | None = Field(default=None, description="When it was connected")
    user: dict[str, Any] | None = Field(default=None, description="GitHub user profile")

    @property
    def login(self) -> str | None:
        """Login of the connected user, if known."""
        return (self.user or {}).get("login")

    @classmethod
    def from_integration(cls, integration: GitHubIntegration | None) -> "IntegrationStatus":
        """Build the status for a stored integration (or its absence).

        A record whose connected flag was never set still counts as
        connected when it carries a user profile.
        """
        if integration is None:
            return cls()
        connected = integration.connected
        if connected is None:
            connected = integration.user is not None
        return cls(
            connected=connected,
            connected_at=integration.connected_at,
            user=integration.user,
        )
