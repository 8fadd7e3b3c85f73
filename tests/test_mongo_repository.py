"""
Tests for the MongoDB repository.

Covers:
- Query construction for each CRUD operation
- Interpretation of insert/replace/delete acknowledgments
- Wrapping of pymongo errors into GenericRepositoryError
"""

from unittest.mock import AsyncMock, MagicMock

import bson
import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from book_service.domain.entities import Book
from book_service.domain.exceptions import (GenericRepositoryError,
                                            MissingIdentifierError,
                                            TargetNotFoundError)
from book_service.repositories.mongo_repository import MongoBookRepository


class FakeCursor:
    """Async-iterable stand-in for a pymongo AsyncCursor."""

    def __init__(self, documents, error=None):
        self.documents = documents
        self.error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for document in self.documents:
            yield document
        if self.error:
            raise self.error


@pytest.fixture
def mock_collection():
    """Create mock pymongo collection."""
    collection = MagicMock()
    collection.name = "books"
    collection.find_one = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.replace_one = AsyncMock()
    collection.delete_one = AsyncMock()
    return collection


@pytest.fixture
def mongo_repo(mock_collection):
    """Create MongoDB repository with mock collection."""
    return MongoBookRepository(mock_collection)


class TestInitialization:
    """Test repository construction."""

    def test_from_db_uses_books_collection(self):
        database = MagicMock()
        repo = MongoBookRepository.from_db(database)

        database.__getitem__.assert_called_once_with("books")
        assert repo.collection is database.__getitem__.return_value
        assert repo.model_cls is Book

    def test_from_db_custom_collection(self):
        database = MagicMock()
        MongoBookRepository.from_db(database, "library_books")
        database.__getitem__.assert_called_once_with("library_books")


class TestFindAll:
    """Test find_all."""

    @pytest.mark.asyncio
    async def test_returns_all_documents(self, mongo_repo, mock_collection):
        ids = [ObjectId(), ObjectId()]
        mock_collection.find.return_value = FakeCursor(
            [
                {"_id": ids[0], "title": "Dune", "author": "Herbert", "year": 1965},
                {"_id": ids[1], "title": "Emma", "author": "Austen", "year": 1815},
            ]
        )

        books = await mongo_repo.find_all()

        mock_collection.find.assert_called_once_with({})
        assert [book.id for book in books] == ids
        assert books[1].title == "Emma"

    @pytest.mark.asyncio
    async def test_empty_collection(self, mongo_repo, mock_collection):
        mock_collection.find.return_value = FakeCursor([])
        assert await mongo_repo.find_all() == []

    @pytest.mark.asyncio
    async def test_cursor_error_is_generic(self, mongo_repo, mock_collection):
        mock_collection.find.return_value = FakeCursor(
            [], error=ServerSelectionTimeoutError("no servers available")
        )

        with pytest.raises(GenericRepositoryError, match="no servers available"):
            await mongo_repo.find_all()

    @pytest.mark.asyncio
    async def test_undecodable_document_is_generic(self, mongo_repo, mock_collection):
        mock_collection.find.return_value = FakeCursor(
            [{"_id": ObjectId(), "title": "Dune"}]
        )

        with pytest.raises(GenericRepositoryError, match="missing field"):
            await mongo_repo.find_all()


class TestFindOne:
    """Test find_one."""

    @pytest.mark.asyncio
    async def test_found(self, mongo_repo, mock_collection):
        oid = ObjectId()
        mock_collection.find_one.return_value = {
            "_id": oid,
            "title": "Dune",
            "author": "Herbert",
            "year": 1965,
        }

        book = await mongo_repo.find_one(oid)

        mock_collection.find_one.assert_awaited_once_with({"_id": oid})
        assert book == Book(id=oid, title="Dune", author="Herbert", year=1965)

    @pytest.mark.asyncio
    async def test_absent_is_none(self, mongo_repo, mock_collection):
        mock_collection.find_one.return_value = None
        assert await mongo_repo.find_one(ObjectId()) is None

    @pytest.mark.asyncio
    async def test_engine_error_is_generic(self, mongo_repo, mock_collection):
        mock_collection.find_one.side_effect = ServerSelectionTimeoutError("timeout")

        with pytest.raises(GenericRepositoryError) as exc_info:
            await mongo_repo.find_one(ObjectId())

        assert exc_info.value.message == "timeout"
        assert isinstance(exc_info.value.__cause__, ServerSelectionTimeoutError)


class TestStore:
    """Test store."""

    @pytest.mark.asyncio
    async def test_returns_book_with_assigned_id(
        self, mongo_repo, mock_collection, sample_book
    ):
        oid = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=oid)

        stored = await mongo_repo.store(sample_book)

        mock_collection.insert_one.assert_awaited_once_with(
            {"title": "Dune", "author": "Herbert", "year": 1965}
        )
        assert stored == sample_book.with_id(oid)

    @pytest.mark.asyncio
    async def test_input_id_is_ignored(self, mongo_repo, mock_collection, sample_book):
        assigned = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=assigned)

        stored = await mongo_repo.store(sample_book.with_id(ObjectId()))

        inserted = mock_collection.insert_one.await_args.args[0]
        assert "_id" not in inserted
        assert stored.id == assigned

    @pytest.mark.asyncio
    async def test_unexpected_inserted_id_is_a_defect(
        self, mongo_repo, mock_collection, sample_book
    ):
        mock_collection.insert_one.return_value = MagicMock(inserted_id="abc")

        with pytest.raises(AssertionError):
            await mongo_repo.store(sample_book)

    @pytest.mark.asyncio
    async def test_engine_error_is_generic(self, mongo_repo, mock_collection, sample_book):
        mock_collection.insert_one.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(GenericRepositoryError, match="down"):
            await mongo_repo.store(sample_book)

    @pytest.mark.asyncio
    async def test_oversized_int_is_generic(self, mongo_repo, mock_collection):
        async def encode_document(document):
            bson.encode(document)

        mock_collection.insert_one.side_effect = encode_document

        with pytest.raises(GenericRepositoryError, match="8-byte ints") as exc_info:
            await mongo_repo.store(Book(title="Dune", author="Herbert", year=10**20))

        assert isinstance(exc_info.value.__cause__, OverflowError)


class TestUpdate:
    """Test update."""

    @pytest.mark.asyncio
    async def test_missing_identifier(self, mongo_repo, mock_collection, sample_book):
        with pytest.raises(MissingIdentifierError):
            await mongo_repo.update(sample_book)

        mock_collection.replace_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_replaces_matching_document(
        self, mongo_repo, mock_collection, sample_book
    ):
        oid = ObjectId()
        book = sample_book.with_id(oid)
        mock_collection.replace_one.return_value = MagicMock(
            matched_count=1, modified_count=1
        )

        result = await mongo_repo.update(book)

        mock_collection.replace_one.assert_awaited_once_with(
            {"_id": oid}, {"title": "Dune", "author": "Herbert", "year": 1965}
        )
        assert result == book

    @pytest.mark.asyncio
    async def test_unchanged_document_is_success(
        self, mongo_repo, mock_collection, sample_book
    ):
        book = sample_book.with_id(ObjectId())
        mock_collection.replace_one.return_value = MagicMock(
            matched_count=1, modified_count=0
        )

        assert await mongo_repo.update(book) == book

    @pytest.mark.asyncio
    async def test_no_match_is_target_not_found(
        self, mongo_repo, mock_collection, sample_book
    ):
        mock_collection.replace_one.return_value = MagicMock(
            matched_count=0, modified_count=0
        )

        with pytest.raises(TargetNotFoundError):
            await mongo_repo.update(sample_book.with_id(ObjectId()))

    @pytest.mark.asyncio
    async def test_engine_error_is_generic(self, mongo_repo, mock_collection, sample_book):
        mock_collection.replace_one.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(GenericRepositoryError):
            await mongo_repo.update(sample_book.with_id(ObjectId()))

    @pytest.mark.asyncio
    async def test_unencodable_string_is_generic(
        self, mongo_repo, mock_collection, sample_book
    ):
        mock_collection.replace_one.side_effect = UnicodeEncodeError(
            "utf-8", "\ud800", 0, 1, "surrogates not allowed"
        )

        with pytest.raises(GenericRepositoryError, match="surrogates not allowed"):
            await mongo_repo.update(sample_book.with_id(ObjectId()))


class TestDeleteOne:
    """Test delete_one."""

    @pytest.mark.asyncio
    async def test_deletes(self, mongo_repo, mock_collection):
        oid = ObjectId()
        mock_collection.delete_one.return_value = MagicMock(deleted_count=1)

        assert await mongo_repo.delete_one(oid) is None
        mock_collection.delete_one.assert_awaited_once_with({"_id": oid})

    @pytest.mark.asyncio
    async def test_nothing_deleted_is_target_not_found(self, mongo_repo, mock_collection):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=0)

        with pytest.raises(TargetNotFoundError):
            await mongo_repo.delete_one(ObjectId())

    @pytest.mark.asyncio
    async def test_engine_error_is_generic(self, mongo_repo, mock_collection):
        mock_collection.delete_one.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(GenericRepositoryError):
            await mongo_repo.delete_one(ObjectId())
