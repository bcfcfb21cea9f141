"""Result objects for resync runs.

Structured results provide consistent interfaces for logging and
CLI output.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from github_org_sync.db.models import ResourceCollection


@dataclass
class ResyncResult:
    """Outcome of a full resync.

    Counts are the records actually written per collection; a collection
    whose fetch came back empty reports 0 and keeps its previous contents.
    """

    counts: dict[ResourceCollection, int] = field(default_factory=dict)
    """Records written per collection."""

    repos_failed: list[str] = field(default_factory=list)
    """Repositories with at least one failed commit/pull/issue fetch."""

    timelines_failed: int = 0
    """Issues whose timeline could not be fetched."""

    started_at: datetime | None = None
    """When the run started."""

    completed_at: datetime | None = None
    """When the run finished writing."""

    @property
    def duration_seconds(self) -> float:
        """Time taken by the run (0 if it hasn't completed)."""
        if self.started_at is None or self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def count(self, collection: ResourceCollection) -> int:
        """Records written to one collection."""
        return self.counts.get(collection, 0)

    def mark_repo_failed(self, full_name: str) -> None:
        """Record a repository as incomplete (once)."""
        if full_name not in self.repos_failed:
            self.repos_failed.append(full_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": True,
            "counts": {c.value: self.count(c) for c in ResourceCollection},
            "repos_failed": list(self.repos_failed),
            "timelines_failed": self.timelines_failed,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": round(self.duration_seconds, 2),
        }
