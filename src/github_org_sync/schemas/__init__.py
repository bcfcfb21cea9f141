"""Pydantic schemas for GitHub Org Sync."""

from .base import SchemaBase
from .integration import IntegrationStatus

__all__ = [
    "IntegrationStatus",
    "SchemaBase",
]
