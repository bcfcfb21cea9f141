"""User extraction and deduplication across fetched resource items."""

from collections.abc import Iterable
from typing import Any

from github_org_sync.logging import get_logger

logger = get_logger(__name__)


def extract_users(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Collect the user embedded in each item.

    Pulls and issues carry a ``user``; commits carry an ``author`` (which
    GitHub sets to null when the commit email isn't linked to an account).
    Items with neither contribute nothing.
    """
    users: list[dict[str, Any]] = []
    for item in items:
        user = item.get("user") or item.get("author")
        if user:
            users.append(user)
    return users


def dedupe_users(users: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep one record per login (exact, case-sensitive match).

    The last record seen for a login wins; its position in the output is
    where that login first appeared.
    """
    by_login: dict[str, dict[str, Any]] = {}
    skipped = 0
    for user in users:
        login = user.get("login")
        if not login:
            skipped += 1
            continue
        by_login[login] = user
    if skipped:
        logger.debug("Skipped {} user records without a login", skipped)
    return list(by_login.values())
