"""SQLAlchemy ORM models for GitHub Org Sync."""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SAEnum,
    Index,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class ResourceCollection(str, Enum):
    """Registry of synced resource types and their collection identifiers."""

    ORGANIZATIONS = "github-organizations"
    REPOSITORIES = "github-repositories"
    COMMITS = "github-commits"
    PULLS = "github-pulls"
    ISSUES = "github-issues"
    ISSUE_CHANGELOGS = "github-issue-changelogs"
    USERS = "github-users"

    @classmethod
    def from_name(cls, name: str) -> "ResourceCollection":
        """Look up a collection by identifier ("github-commits") or member name ("commits").

        Raises:
            ValueError: If no collection matches
        """
        try:
            return cls(name)
        except ValueError:
            pass
        try:
            return cls[name.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown collection: {name}") from None


# The integration table holds exactly one row, always at this key
INTEGRATION_SLOT = 1


# ------------------------------------------------------------------------------
# GitHubIntegration model
# ------------------------------------------------------------------------------
class GitHubIntegration(Base):
    """Stored credential and profile of the connected GitHub account."""

    __tablename__ = "github_integration"

    slot: Mapped[int] = mapped_column(
        primary_key=True, autoincrement=False, default=INTEGRATION_SLOT
    )
    access_token: Mapped[str] = mapped_column(String(255))
    token_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    scope: Mapped[str | None] = mapped_column(String(500), nullable=True)
    connected: Mapped[bool] = mapped_column(default=True)
    connected_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    user: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # A second account can never be stored alongside the first
    __table_args__ = (
        CheckConstraint(f"slot = {INTEGRATION_SLOT}", name="ck_integration_single_slot"),
    )

    def __repr__(self) -> str:
        login = (self.user or {}).get("login")
        return f"<GitHubIntegration(login={login!r}, connected={self.connected})>"


# ------------------------------------------------------------------------------
# CollectionRecord model
# ------------------------------------------------------------------------------
class CollectionRecord(Base):
    """One fetched resource item stored in a named collection."""

    __tablename__ = "collection_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Stored as the collection identifier ("github-commits"), not the member name
    collection: Mapped[ResourceCollection] = mapped_column(
        SAEnum(
            ResourceCollection,
            values_callable=lambda members: [m.value for m in members],
            native_enum=False,
            length=32,
            name="resource_collection",
        )
    )
    position: Mapped[int] = mapped_column()  # order within the fetched batch
    payload: Mapped[dict[str, Any]] = mapped_column(JSON)
    synced_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint("collection", "position", name="uq_collection_position"),
        Index("ix_collection_records_collection", "collection"),
    )

    def __repr__(self) -> str:
        return (
            f"<CollectionRecord(id={self.id}, collection='{self.collection.value}', "
            f"position={self.position})>"
        )
