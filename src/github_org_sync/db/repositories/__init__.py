"""Repository pattern implementation for database access.

This module provides repository classes that encapsulate all database
access logic, providing a clean abstraction over SQLAlchemy models.
"""

from .base import BaseRepository
from .collection import CollectionRepository
from .integration import IntegrationRepository

__all__ = [
    "BaseRepository",
    "CollectionRepository",
    "IntegrationRepository",
]
