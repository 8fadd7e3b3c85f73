"""
Book CRUD router.

Every handler makes exactly one repository call and translates its
outcome into a response. Storage error details are logged, never
returned to the caller.
"""

from typing import List

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import get_book_repository
from ..domain.entities import Book
from ..domain.exceptions import RepositoryError, RepositoryErrorKind
from ..metrics import track_repository_operation
from ..models import BookPayload, BookResponse, ErrorResponse
from ..repositories.repository import IRepository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])

ID_MISMATCH_DETAIL = "resource id mismatch"

BookRepository = IRepository[Book, ObjectId]


def parse_book_id(book_id: str) -> ObjectId:
    """
    Parse the ``{book_id}`` path segment.

    Raises:
        HTTPException: 400 with the parse error if it is not an ObjectId
    """
    try:
        return ObjectId(book_id)
    except (InvalidId, TypeError) as e:
        logger.info("Rejected malformed book id", book_id=book_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def repository_error_response(operation: str, error: RepositoryError) -> Response:
    """
    Map a repository failure to an empty-bodied response.

    TargetNotFound is a 404; every other kind is a server-side fault.
    """
    track_repository_operation(operation, error.kind.value)

    if error.kind is RepositoryErrorKind.TARGET_NOT_FOUND:
        logger.info("Repository target not found", operation=operation, **error.details)
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    logger.error(
        "Repository operation failed",
        operation=operation,
        kind=error.kind.value,
        error=error.message,
        details=error.details,
    )
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get(
    "",
    response_model=List[BookResponse],
    responses={500: {"description": "Storage failure"}},
    summary="List all books",
)
async def fetch_all(repository: BookRepository = Depends(get_book_repository)):
    """Return every stored book, in no particular order."""
    try:
        books = await repository.find_all()
    except RepositoryError as e:
        return repository_error_response("find_all", e)

    track_repository_operation("find_all", "ok")
    return [BookResponse.from_entity(book) for book in books]


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Book not found"},
        500: {"description": "Storage failure"},
    },
    summary="Get a book",
)
async def fetch_one(
    book_id: ObjectId = Depends(parse_book_id),
    repository: BookRepository = Depends(get_book_repository),
):
    """Return the book with the given id."""
    try:
        book = await repository.find_one(book_id)
    except RepositoryError as e:
        return repository_error_response("find_one", e)

    if book is None:
        track_repository_operation("find_one", "absent")
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    track_repository_operation("find_one", "ok")
    return BookResponse.from_entity(book)


@router.post(
    "",
    response_model=BookResponse,
    responses={500: {"description": "Storage failure"}},
    summary="Create a book",
)
async def store(
    payload: BookPayload,
    repository: BookRepository = Depends(get_book_repository),
):
    """
    Create a book.

    Any id in the body is ignored; the stored book gets a fresh one.
    """
    try:
        book = await repository.store(payload.to_entity())
    except RepositoryError as e:
        return repository_error_response("store", e)

    track_repository_operation("store", "ok")
    logger.info("Book created", book_id=str(book.id))
    return BookResponse.from_entity(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"description": "Malformed id or id mismatch", "model": ErrorResponse},
        404: {"description": "Book not found"},
        500: {"description": "Storage failure"},
    },
    summary="Replace a book",
)
async def update(
    payload: BookPayload,
    book_id: ObjectId = Depends(parse_book_id),
    repository: BookRepository = Depends(get_book_repository),
):
    """
    Replace every field of an existing book.

    The body must carry the same id as the path.
    """
    book = payload.to_entity()
    if book.id != book_id:
        logger.info("Rejected book update", book_id=str(book_id), body_id=payload.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=ID_MISMATCH_DETAIL
        )

    try:
        book = await repository.update(book)
    except RepositoryError as e:
        return repository_error_response("update", e)

    track_repository_operation("update", "ok")
    logger.info("Book updated", book_id=str(book_id))
    return BookResponse.from_entity(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Book not found"},
        500: {"description": "Storage failure"},
    },
    summary="Delete a book",
)
async def delete(
    book_id: ObjectId = Depends(parse_book_id),
    repository: BookRepository = Depends(get_book_repository),
):
    """Delete the book with the given id."""
    try:
        await repository.delete_one(book_id)
    except RepositoryError as e:
        return repository_error_response("delete_one", e)

    track_repository_operation("delete_one", "ok")
    logger.info("Book deleted", book_id=str(book_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
