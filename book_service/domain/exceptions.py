"""
Repository exceptions for the book service domain.

The set is closed: every repository operation fails with exactly one of
the classes below, tagged with a RepositoryErrorKind. These exceptions are
independent of infrastructure concerns (HTTP, MongoDB, etc.).
"""

from enum import Enum
from typing import Any, Optional


class RepositoryErrorKind(str, Enum):
    """Kinds of repository failure."""

    GENERIC = "generic"
    MISSING_IDENTIFIER = "missing_identifier"
    TARGET_NOT_FOUND = "target_not_found"


class RepositoryError(Exception):
    """Base exception for all repository errors."""

    def __init__(
        self,
        kind: RepositoryErrorKind,
        message: str,
        details: Optional[dict] = None,
    ):
        self.kind = kind
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class GenericRepositoryError(RepositoryError):
    """Raised when the storage engine fails (connectivity, encoding, etc.)."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            RepositoryErrorKind.GENERIC,
            message=message,
            details={"operation": operation},
        )


class MissingIdentifierError(RepositoryError):
    """Raised when an update is attempted on an entity without an id."""

    def __init__(self):
        super().__init__(
            RepositoryErrorKind.MISSING_IDENTIFIER,
            message="Entity has no identifier",
        )


class TargetNotFoundError(RepositoryError):
    """Raised when an update or delete matches no stored record."""

    def __init__(self, identifier: Any = None):
        message = "Target not found"
        if identifier is not None:
            message = f"Target not found: {identifier}"
        super().__init__(
            RepositoryErrorKind.TARGET_NOT_FOUND,
            message=message,
            details={"identifier": str(identifier) if identifier is not None else None},
        )
