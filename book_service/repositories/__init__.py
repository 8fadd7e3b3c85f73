"""
Repository layer - Data access abstractions.

This layer provides interfaces for data persistence and retrieval,
hiding implementation details from the request handlers.
"""

from .memory_repository import InMemoryBookRepository
from .mongo_repository import MongoBookRepository, MongoRepository
from .repository import IRepository

__all__ = [
    "IRepository",
    "MongoRepository",
    "MongoBookRepository",
    "InMemoryBookRepository",
]
