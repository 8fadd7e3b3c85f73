"""
Domain entities for the book catalogue.

Core business objects persisted by the repositories. The identifier is
assigned by the storage engine on first write and never reassigned.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from bson import ObjectId


@dataclass(frozen=True)
class Book:
    """
    A stored book.

    ``id`` is None until the book has been persisted.
    """

    title: str
    author: str
    year: int
    id: Optional[ObjectId] = None

    COLLECTION_NAME = "books"

    def with_id(self, book_id: ObjectId) -> "Book":
        """Return a copy of this book carrying ``book_id``."""
        return replace(self, id=book_id)

    def same_resource(self, other: "Book") -> bool:
        """Two books name the same resource iff both ids are set and equal."""
        return self.id is not None and other.id is not None and self.id == other.id

    def to_document(self) -> dict:
        """
        Convert to a MongoDB document.

        The ``_id`` key is only present once the book has an identifier,
        so inserts let the engine generate one.
        """
        document: dict = {}
        if self.id is not None:
            document["_id"] = self.id
        document["title"] = self.title
        document["author"] = self.author
        document["year"] = self.year
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Book":
        """
        Build a book from a MongoDB document.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        try:
            book_id = document.get("_id")
            title = document["title"]
            author = document["author"]
            year = document["year"]
        except KeyError as e:
            raise ValueError(f"Book document missing field: {e.args[0]}") from e

        if book_id is not None and not isinstance(book_id, ObjectId):
            raise ValueError(f"Invalid _id type: {type(book_id).__name__}")
        if not isinstance(title, str) or not isinstance(author, str):
            raise ValueError("Book title and author must be strings")
        # bool is an int subclass
        if isinstance(year, bool) or not isinstance(year, int):
            raise ValueError(f"Invalid year type: {type(year).__name__}")

        return cls(id=book_id, title=title, author=author, year=year)
