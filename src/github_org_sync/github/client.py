"""Async GitHub API client wrapper using githubkit.

This module provides the paginated fetcher used by the resync pipeline:
every collection endpoint is walked page by page up to an item cap, with
a fixed pause between pages to stay clear of GitHub's rate limits.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import RequestError, RequestFailed

from github_org_sync.config import FetchConfig, get_settings
from github_org_sync.logging import get_logger

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = get_logger(__name__)


class GitHubClient:
    """Async GitHub API client for full-snapshot fetching.

    Usage:
        async with GitHubClient(token) as client:
            orgs = await client.fetch_all_pages("/user/orgs")
            for org in orgs:
                print(org["login"])
    """

    def __init__(
        self,
        token: str | None = None,
        fetch_config: FetchConfig | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub access token. If not provided, uses GITHUB_TOKEN from settings.
            fetch_config: Pagination defaults (uses settings if not provided)

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        settings = get_settings()
        self._token = token or settings.github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Connect an account or set GITHUB_TOKEN."
            )
        self._fetch_config = fetch_config or settings.fetch
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            # Failed requests must surface immediately; callers decide what to skip
            self._client = GitHub(self._token, auto_retry=False)
        return self._client

    async def close(self) -> None:
        """Release the underlying githubkit client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------
    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Issue an authenticated GET and return the decoded JSON body."""
        try:
            resp = await self._github.arequest("GET", path, params=params)
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubClientError(f"Request to {path} failed: {e}") from e
        return resp.json()

    async def get_authenticated_user(self) -> dict[str, Any]:
        """Get the profile of the user the token belongs to (GET /user)."""
        user = await self._get("/user")
        if not isinstance(user, dict):
            raise GitHubClientError("Unexpected response body for /user")
        return user

    async def fetch_all_pages(
        self,
        path: str,
        *,
        max_items: int | None = None,
        page_size: int | None = None,
        inter_page_delay: float | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every page of a list endpoint, up to an item cap.

        Pages are requested one at a time starting at page 1. Fetching
        stops on an empty page, on a page shorter than page_size, or once
        the accumulated count reaches max_items. The cap is soft: the page
        that reaches it is kept whole.

        Args:
            path: API path, e.g. "/orgs/acme/repos"
            max_items: Item cap (defaults to fetch.default_max_items)
            page_size: Items per page (defaults to fetch.page_size)
            inter_page_delay: Seconds to wait between pages
                (defaults to fetch.inter_page_delay)

        Returns:
            All fetched items in API order

        Raises:
            GitHubClientError: If any page request fails. Nothing is retried
                and items from earlier pages are discarded.
        """
        config = self._fetch_config
        if max_items is None:
            max_items = config.default_max_items
        if page_size is None:
            page_size = config.page_size
        if inter_page_delay is None:
            inter_page_delay = config.inter_page_delay

        results: list[dict[str, Any]] = []
        page = 1

        while True:
            data = await self._get(path, params={"per_page": page_size, "page": page})

            if not data:
                break
            if not isinstance(data, list):
                raise GitHubClientError(f"Expected a list from {path}, got {type(data).__name__}")

            results.extend(data)

            if len(results) >= max_items:
                logger.warning("Reached data cap ({}) for {}", max_items, path)
                break

            if len(data) < page_size:
                break

            if inter_page_delay > 0:
                await asyncio.sleep(inter_page_delay)
            page += 1

        logger.debug("Fetched {} items from {} ({} pages)", len(results), path, page)
        return results

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status == 403:
            headers = error.response.headers
            if "x-ratelimit-remaining" in headers:
                remaining = int(headers.get("x-ratelimit-remaining", "0"))
                if remaining == 0:
                    reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                    reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                    return GitHubRateLimitError(
                        "GitHub rate limit exceeded",
                        reset_at=reset_at,
                    )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
