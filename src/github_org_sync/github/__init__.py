"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client with a paginated fetcher
- Resync: ResyncOrchestrator, ResyncResult, user extraction
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .sync import (
    NoActiveIntegrationError,
    OutputFormat,
    ResyncOrchestrator,
    ResyncResult,
    dedupe_users,
    extract_users,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    # Resync
    "NoActiveIntegrationError",
    "OutputFormat",
    "ResyncOrchestrator",
    "ResyncResult",
    "dedupe_users",
    "extract_users",
]
