"""
Shared dependencies for the application.

Provides dependency injection functions used across routers. The
repository is created once by the application lifespan and kept on
``app.state``.
"""

from bson import ObjectId
from fastapi import Request

from .domain.entities import Book
from .repositories.repository import IRepository


def get_book_repository(request: Request) -> IRepository[Book, ObjectId]:
    """
    Get the book repository for dependency injection.

    Raises:
        RuntimeError: If the application has not initialized its repository
    """
    repository = getattr(request.app.state, "book_repository", None)
    if repository is None:
        raise RuntimeError("Book repository not initialized")
    return repository
