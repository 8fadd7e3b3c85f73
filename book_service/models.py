"""Pydantic models for request/response validation."""

from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from .domain.entities import Book


class BookPayload(BaseModel):
    """Request body for creating or replacing a book."""

    id: Optional[str] = Field(None, description="Book id (24 hex characters)")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    year: int = Field(
        ..., strict=True, ge=-(2**31), le=2**31 - 1, description="Publication year"
    )

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: Optional[str]) -> Optional[str]:
        """Ensure a supplied id is a valid ObjectId string."""
        if v is not None and not ObjectId.is_valid(v):
            raise ValueError(f"'{v}' is not a valid ObjectId")
        return v

    def to_entity(self) -> Book:
        """Convert to a domain Book."""
        return Book(
            id=ObjectId(self.id) if self.id is not None else None,
            title=self.title,
            author=self.author,
            year=self.year,
        )


class BookResponse(BaseModel):
    """Book response model."""

    id: str
    title: str
    author: str
    year: int

    @classmethod
    def from_entity(cls, book: Book) -> "BookResponse":
        """Build a response from a persisted Book."""
        return cls(id=str(book.id), title=book.title, author=book.author, year=book.year)


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    timestamp: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    checks: dict
    timestamp: str
