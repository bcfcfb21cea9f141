"""Resync module - GitHub to local store synchronization.

Services:
- ResyncOrchestrator: full re-fetch of orgs, repos, commits, pulls,
  issues, issue timelines and users, replacing every collection
- extract_users / dedupe_users: user records referenced by fetched items
"""

from .enums import OutputFormat
from .orchestrator import NoActiveIntegrationError, ResyncOrchestrator
from .results import ResyncResult
from .users import dedupe_users, extract_users

__all__ = [
    "NoActiveIntegrationError",
    "OutputFormat",
    "ResyncOrchestrator",
    "ResyncResult",
    "dedupe_users",
    "extract_users",
]
