"""
Domain layer - entities and exceptions.

Framework-agnostic business objects shared by repositories and routers.
"""

from .entities import Book
from .exceptions import (GenericRepositoryError, MissingIdentifierError,
                         RepositoryError, RepositoryErrorKind,
                         TargetNotFoundError)

__all__ = [
    "Book",
    "RepositoryError",
    "RepositoryErrorKind",
    "GenericRepositoryError",
    "MissingIdentifierError",
    "TargetNotFoundError",
]
