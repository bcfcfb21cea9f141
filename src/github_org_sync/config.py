"""Configuration settings for GitHub Org Sync."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FetchConfig(BaseModel):
    """Configuration for paginated fetching from the GitHub API.

    Controls page size, pacing between pages, and the per-resource
    item caps applied during a resync.
    """

    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Items requested per page (GitHub maximum is 100)",
    )
    inter_page_delay_ms: int = Field(
        default=200,
        ge=0,
        description="Milliseconds to wait between page requests",
    )

    # Item caps (soft: the page that crosses the cap is kept whole)
    default_max_items: int = Field(
        default=2000,
        ge=1,
        description="Cap for organizations and repositories",
    )
    commit_cap: int = Field(
        default=2000,
        ge=1,
        description="Maximum commits fetched per repository",
    )
    pull_cap: int = Field(
        default=500,
        ge=1,
        description="Maximum pull requests fetched per repository",
    )
    issue_cap: int = Field(
        default=500,
        ge=1,
        description="Maximum issues fetched per repository",
    )
    timeline_cap: int = Field(
        default=500,
        ge=1,
        description="Maximum timeline events fetched per issue",
    )

    @property
    def inter_page_delay(self) -> float:
        """Get the inter-page delay in seconds."""
        return self.inter_page_delay_ms / 1000


class PersistenceConfig(BaseModel):
    """Configuration for collection writes."""

    batch_size: int = Field(
        default=500,
        ge=1,
        le=10000,
        description="Records inserted per batch when replacing a collection",
    )


class SyncConfig(BaseModel):
    """Configuration for resync runs."""

    resync_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Overall deadline for a resync run (None = no deadline)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./github_org_sync.db",
        description="Async database connection string",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub access token used by `ghsync connect` when none is given",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Fetching & Persistence
    # --------------------------------------------------------------------------
    fetch: FetchConfig = Field(
        default_factory=FetchConfig,
        description="Pagination, pacing and cap configuration",
    )
    persistence: PersistenceConfig = Field(
        default_factory=PersistenceConfig,
        description="Collection write configuration",
    )

    # --------------------------------------------------------------------------
    # Sync Configuration
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Resync run configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
