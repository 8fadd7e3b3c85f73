"""
Repository interface (Abstract Base Class).

Defines the contract for entity persistence and retrieval independent
of the underlying storage engine.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

ModelT = TypeVar("ModelT")
IdT = TypeVar("IdT")


class IRepository(ABC, Generic[ModelT, IdT]):
    """
    Abstract repository interface for CRUD operations.

    Generic over the stored entity type and its identifier type. All
    failures are reported as RepositoryError subclasses; storage engine
    exceptions never cross this boundary.
    """

    @abstractmethod
    async def find_all(self) -> List[ModelT]:
        """
        Fetch every stored entity.

        Returns:
            All entities, in no guaranteed order

        Raises:
            GenericRepositoryError: On storage engine failure
        """
        pass

    @abstractmethod
    async def find_one(self, model_id: IdT) -> Optional[ModelT]:
        """
        Fetch a single entity by identifier.

        Args:
            model_id: Identifier to look up

        Returns:
            The entity if found, None otherwise

        Raises:
            GenericRepositoryError: On storage engine failure
        """
        pass

    @abstractmethod
    async def store(self, model: ModelT) -> ModelT:
        """
        Persist a new entity.

        Any identifier on the input is ignored and replaced by the one
        the storage engine assigns.

        Args:
            model: Entity to persist

        Returns:
            The persisted entity carrying its assigned identifier

        Raises:
            GenericRepositoryError: On storage engine failure
        """
        pass

    @abstractmethod
    async def update(self, model: ModelT) -> ModelT:
        """
        Replace the stored entity that has the same identifier.

        Args:
            model: Entity with all fields to store

        Returns:
            The entity as given

        Raises:
            MissingIdentifierError: If the entity has no identifier
            TargetNotFoundError: If no stored entity has that identifier
            GenericRepositoryError: On storage engine failure
        """
        pass

    @abstractmethod
    async def delete_one(self, model_id: IdT) -> None:
        """
        Remove the entity with the given identifier.

        Args:
            model_id: Identifier of the entity to remove

        Raises:
            TargetNotFoundError: If no stored entity has that identifier
            GenericRepositoryError: On storage engine failure
        """
        pass
