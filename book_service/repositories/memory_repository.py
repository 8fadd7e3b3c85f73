"""
In-memory implementation of the book repository.

Used as a test double and for running the service without MongoDB.
"""

import logging
from typing import Dict, List, Optional

from bson import ObjectId

from ..domain.entities import Book
from ..domain.exceptions import MissingIdentifierError, TargetNotFoundError
from .repository import IRepository

logger = logging.getLogger(__name__)


class InMemoryBookRepository(IRepository[Book, ObjectId]):
    """
    Dict-backed book repository.

    Mirrors the MongoDB semantics: identifiers are generated on store,
    update matches on identifier, delete is not idempotent.
    """

    def __init__(self):
        self._books: Dict[ObjectId, Book] = {}

    async def find_all(self) -> List[Book]:
        return list(self._books.values())

    async def find_one(self, model_id: ObjectId) -> Optional[Book]:
        return self._books.get(model_id)

    async def store(self, model: Book) -> Book:
        stored = model.with_id(ObjectId())
        self._books[stored.id] = stored
        logger.debug(f"Stored book {stored.id} in memory")
        return stored

    async def update(self, model: Book) -> Book:
        if model.id is None:
            raise MissingIdentifierError()
        if model.id not in self._books:
            raise TargetNotFoundError(model.id)
        self._books[model.id] = model
        return model

    async def delete_one(self, model_id: ObjectId) -> None:
        if self._books.pop(model_id, None) is None:
            raise TargetNotFoundError(model_id)

    def __len__(self) -> int:
        return len(self._books)
