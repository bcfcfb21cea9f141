"""Database module for GitHub Org Sync."""

from github_org_sync.db.engine import (
    create_tables,
    get_engine,
    get_session,
)
from github_org_sync.db.models import (
    INTEGRATION_SLOT,
    Base,
    CollectionRecord,
    GitHubIntegration,
    ResourceCollection,
)
from github_org_sync.db.repositories import (
    BaseRepository,
    CollectionRepository,
    IntegrationRepository,
)

__all__ = [
    # Models
    "Base",
    "CollectionRecord",
    "GitHubIntegration",
    "INTEGRATION_SLOT",
    "ResourceCollection",
    # Engine
    "create_tables",
    "get_engine",
    "get_session",
    # Repositories
    "BaseRepository",
    "CollectionRepository",
    "IntegrationRepository",
]
