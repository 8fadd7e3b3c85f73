"""
MongoDB implementation of the repository interface.

Translates repository operations into pymongo collection commands and
interprets their acknowledgments.
"""

import logging
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from bson import ObjectId
from bson.errors import BSONError
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from ..domain.entities import Book
from ..domain.exceptions import (GenericRepositoryError,
                                 MissingIdentifierError, TargetNotFoundError)
from .repository import IRepository

logger = logging.getLogger(__name__)

# Engine errors reported as GenericRepositoryError. BSON encoding raises
# OverflowError for ints over 8 bytes and UnicodeEncodeError for
# unencodable strings before anything reaches the server.
ENGINE_ERRORS = (PyMongoError, BSONError, OverflowError, UnicodeEncodeError)

ModelT = TypeVar("ModelT")


class MongoRepository(IRepository[ModelT, ObjectId], Generic[ModelT]):
    """
    Generic MongoDB repository bound to one collection.

    The model class must provide ``to_document()``, ``from_document()``
    and ``with_id()``.
    """

    def __init__(self, collection: AsyncCollection, model_cls: Type[ModelT]):
        """
        Initialize MongoDB repository.

        Args:
            collection: Async pymongo collection holding the entities
            model_cls: Entity class stored in the collection
        """
        self.collection = collection
        self.model_cls = model_cls

    def _decode(self, document: Mapping[str, Any]) -> ModelT:
        try:
            return self.model_cls.from_document(document)
        except ValueError as e:
            logger.error(f"Error decoding document from {self.collection.name}: {e}")
            raise GenericRepositoryError(str(e), operation="decode") from e

    async def find_all(self) -> List[ModelT]:
        """Fetch every document in the collection."""
        try:
            documents = [document async for document in self.collection.find({})]
        except ENGINE_ERRORS as e:
            logger.error(f"Error listing {self.collection.name}: {e}")
            raise GenericRepositoryError(str(e), operation="find_all") from e

        return [self._decode(document) for document in documents]

    async def find_one(self, model_id: ObjectId) -> Optional[ModelT]:
        """Fetch the document whose _id equals model_id."""
        try:
            document = await self.collection.find_one({"_id": model_id})
        except ENGINE_ERRORS as e:
            logger.error(f"Error finding {model_id} in {self.collection.name}: {e}")
            raise GenericRepositoryError(str(e), operation="find_one") from e

        if document is None:
            logger.debug(f"No document {model_id} in {self.collection.name}")
            return None
        return self._decode(document)

    async def store(self, model: ModelT) -> ModelT:
        """Insert a new document and return the model with its assigned _id."""
        document = model.to_document()
        document.pop("_id", None)

        try:
            result = await self.collection.insert_one(document)
        except ENGINE_ERRORS as e:
            logger.error(f"Error inserting into {self.collection.name}: {e}")
            raise GenericRepositoryError(str(e), operation="store") from e

        inserted_id = result.inserted_id
        if not isinstance(inserted_id, ObjectId):
            raise AssertionError(
                f"Unexpected inserted_id type: {type(inserted_id).__name__}"
            )

        logger.info(f"Inserted {inserted_id} into {self.collection.name}")
        return model.with_id(inserted_id)

    async def update(self, model: ModelT) -> ModelT:
        """
        Replace the stored document with the model's _id.

        Success is decided on matched_count, so replacing a document with
        identical values still succeeds.
        """
        model_id = model.id
        if model_id is None:
            raise MissingIdentifierError()

        document = model.to_document()
        document.pop("_id", None)

        try:
            result = await self.collection.replace_one({"_id": model_id}, document)
        except ENGINE_ERRORS as e:
            logger.error(f"Error updating {model_id} in {self.collection.name}: {e}")
            raise GenericRepositoryError(str(e), operation="update") from e

        if result.matched_count == 0:
            raise TargetNotFoundError(model_id)

        logger.info(f"Updated {model_id} in {self.collection.name}")
        return model

    async def delete_one(self, model_id: ObjectId) -> None:
        """Delete the document whose _id equals model_id."""
        try:
            result = await self.collection.delete_one({"_id": model_id})
        except ENGINE_ERRORS as e:
            logger.error(f"Error deleting {model_id} from {self.collection.name}: {e}")
            raise GenericRepositoryError(str(e), operation="delete_one") from e

        if result.deleted_count == 0:
            raise TargetNotFoundError(model_id)

        logger.info(f"Deleted {model_id} from {self.collection.name}")


class MongoBookRepository(MongoRepository[Book]):
    """MongoDB repository for books."""

    def __init__(self, collection: AsyncCollection):
        super().__init__(collection, Book)

    @classmethod
    def from_db(
        cls, database: AsyncDatabase, collection_name: Optional[str] = None
    ) -> "MongoBookRepository":
        """
        Bind a book repository to a collection of ``database``.

        Args:
            database: Async pymongo database
            collection_name: Collection to use (default: Book.COLLECTION_NAME)
        """
        return cls(database[collection_name or Book.COLLECTION_NAME])
