"""Resync Orchestrator - full snapshot of the connected account's GitHub activity.

Walks organizations -> repositories -> commits/pulls/issues -> issue
timelines, then replaces every collection with what was fetched and
stores the users referenced along the way.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from github_org_sync.config import get_settings
from github_org_sync.db.models import ResourceCollection
from github_org_sync.github.client import GitHubClient
from github_org_sync.logging import bind_issue, bind_repo, get_logger

from .results import ResyncResult
from .users import dedupe_users, extract_users

if TYPE_CHECKING:
    from github_org_sync.config import Settings
    from github_org_sync.db.repositories import CollectionRepository, IntegrationRepository

logger = get_logger(__name__)

ClientFactory = Callable[[str], GitHubClient]


def _repo_label(repo: dict[str, Any]) -> str:
    """Name a repository in failure reports ("owner/name")."""
    if repo.get("full_name"):
        return repo["full_name"]
    owner = (repo.get("owner") or {}).get("login")
    return f"{owner}/{repo.get('name')}" if owner else str(repo.get("name"))


class NoActiveIntegrationError(Exception):
    """Raised when a resync is requested without a stored access token."""

    def __init__(self, message: str = "No active GitHub integration found.") -> None:
        super().__init__(message)


@dataclass
class _Snapshot:
    """Per-repository detail lists accumulated over a run."""

    commits: list[dict[str, Any]] = field(default_factory=list)
    pulls: list[dict[str, Any]] = field(default_factory=list)
    issues: list[dict[str, Any]] = field(default_factory=list)
    changelogs: list[dict[str, Any]] = field(default_factory=list)


class ResyncOrchestrator:
    """Orchestrates a full re-fetch and replace of all synced collections.

    Organizations and repositories are fetched sequentially. For each
    repository, commits, pulls and issues are fetched concurrently and
    each issue's timeline after that. Failures below the repository level
    are logged and skipped; failures fetching organizations or
    repositories, and any write failure, abort the run.

    Usage:
        async with get_session() as session:
            orchestrator = ResyncOrchestrator(
                integration_repository=IntegrationRepository(session),
                collection_repository=CollectionRepository(session),
            )
            result = await orchestrator.resync()
    """

    def __init__(
        self,
        integration_repository: IntegrationRepository,
        collection_repository: CollectionRepository,
        client_factory: ClientFactory | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            integration_repository: Source of the stored access token
            collection_repository: Writer for the synced collections
            client_factory: Builds a GitHubClient from an access token
                (defaults to GitHubClient)
            settings: Settings to use (defaults to get_settings())
        """
        self._integrations = integration_repository
        self._collections = collection_repository
        self._settings = settings or get_settings()
        self._client_factory: ClientFactory = client_factory or (
            lambda token: GitHubClient(token, fetch_config=self._settings.fetch)
        )

    async def resync(self) -> ResyncResult:
        """Run a full resync.

        Returns:
            ResyncResult with the number of records written per collection

        Raises:
            NoActiveIntegrationError: If no integration or token is stored.
                Raised before any request is made.
            TimeoutError: If sync.resync_timeout_seconds elapses first
        """
        integration = await self._integrations.get()
        if integration is None or not integration.access_token:
            raise NoActiveIntegrationError()

        timeout = self._settings.sync.resync_timeout_seconds
        if timeout is None:
            return await self._run(integration.access_token)
        async with asyncio.timeout(timeout):
            return await self._run(integration.access_token)

    async def _run(self, token: str) -> ResyncResult:
        fetch = self._settings.fetch
        result = ResyncResult(started_at=datetime.now(UTC))
        snapshot = _Snapshot()

        logger.info("Starting GitHub re-sync...")

        async with self._client_factory(token) as client:
            # 1) Organizations of the authenticated user
            orgs = await client.fetch_all_pages("/user/orgs", max_items=fetch.default_max_items)
            await self._write(result, ResourceCollection.ORGANIZATIONS, orgs)

            # 2) Repositories of every organization
            repos: list[dict[str, Any]] = []
            for org in orgs:
                org_repos = await client.fetch_all_pages(
                    f"/orgs/{org['login']}/repos",
                    max_items=fetch.default_max_items,
                )
                logger.info("Found {} repositories in {}", len(org_repos), org["login"])
                repos.extend(org_repos)
            await self._write(result, ResourceCollection.REPOSITORIES, repos)

            # 3) Commits, pulls, issues and issue timelines per repository
            for repo in repos:
                try:
                    await self._sync_repository(client, repo, snapshot, result)
                except Exception as e:
                    logger.warning("Failed to fetch details for {}: {}", _repo_label(repo), e)
                    result.mark_repo_failed(_repo_label(repo))

        # 4) Users referenced by commits, pulls and issues
        users = dedupe_users(
            extract_users(snapshot.commits)
            + extract_users(snapshot.pulls)
            + extract_users(snapshot.issues)
        )

        await self._write(result, ResourceCollection.COMMITS, snapshot.commits)
        await self._write(result, ResourceCollection.PULLS, snapshot.pulls)
        await self._write(result, ResourceCollection.ISSUES, snapshot.issues)
        await self._write(result, ResourceCollection.ISSUE_CHANGELOGS, snapshot.changelogs)
        await self._write(result, ResourceCollection.USERS, users)

        result.completed_at = datetime.now(UTC)
        logger.info(
            "Re-sync complete: orgs={}, repos={}, commits={}, pulls={}, issues={}, "
            "changelogs={}, users={} ({:.1f}s)",
            result.count(ResourceCollection.ORGANIZATIONS),
            result.count(ResourceCollection.REPOSITORIES),
            result.count(ResourceCollection.COMMITS),
            result.count(ResourceCollection.PULLS),
            result.count(ResourceCollection.ISSUES),
            result.count(ResourceCollection.ISSUE_CHANGELOGS),
            result.count(ResourceCollection.USERS),
            result.duration_seconds,
        )
        return result

    async def _sync_repository(
        self,
        client: GitHubClient,
        repo: dict[str, Any],
        snapshot: _Snapshot,
        result: ResyncResult,
    ) -> None:
        """Fetch one repository's details into the snapshot.

        Commits, pulls and issues are fetched together; a failure in one
        of them is logged without discarding the others.
        """
        fetch = self._settings.fetch
        owner, name = repo["owner"]["login"], repo["name"]
        base = f"/repos/{owner}/{name}"
        log = bind_repo(owner, name)

        outcomes = await asyncio.gather(
            client.fetch_all_pages(f"{base}/commits", max_items=fetch.commit_cap),
            client.fetch_all_pages(f"{base}/pulls", max_items=fetch.pull_cap),
            client.fetch_all_pages(f"{base}/issues", max_items=fetch.issue_cap),
            return_exceptions=True,
        )

        fetched: list[list[dict[str, Any]]] = []
        for kind, outcome in zip(("commits", "pulls", "issues"), outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                log.warning("Failed to fetch {} for {}: {}", kind, _repo_label(repo), outcome)
                result.mark_repo_failed(_repo_label(repo))
                fetched.append([])
            else:
                fetched.append(outcome)

        commits, pulls, issues = fetched
        snapshot.commits.extend(commits)
        snapshot.pulls.extend(pulls)
        snapshot.issues.extend(issues)
        log.debug(
            "Fetched commits={}, pulls={}, issues={}", len(commits), len(pulls), len(issues)
        )

        for issue in issues:
            number = issue.get("number")
            if number is None:
                log.debug("Skipping timeline for an issue without a number")
                continue
            try:
                timeline = await client.fetch_all_pages(
                    f"{base}/issues/{number}/timeline",
                    max_items=fetch.timeline_cap,
                )
            except Exception as e:
                bind_issue(owner, name, number).warning(
                    "Failed to fetch timeline for {} #{}: {}", name, number, e
                )
                result.timelines_failed += 1
                continue
            snapshot.changelogs.extend(timeline)

    async def _write(
        self,
        result: ResyncResult,
        collection: ResourceCollection,
        records: list[dict[str, Any]],
    ) -> None:
        count = await self._collections.replace_collection(
            collection,
            records,
            batch_size=self._settings.persistence.batch_size,
        )
        result.counts[collection] = count
