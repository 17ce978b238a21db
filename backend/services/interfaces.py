"""
Service Interfaces

Abstract base classes for the collaborators the service layer depends on,
following the Dependency Inversion Principle. This allows for dependency
injection and easier testing/mocking.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Protocol, TypeVar


class Identified(Protocol):
    """Anything carrying a numeric id, such as models.LongIdEntity subclasses."""

    id: int


E = TypeVar('E', bound=Identified)


class IEntityRepository(ABC, Generic[E]):
    """
    Interface for entity persistence used by CrudService.

    The difference between save and persist is owned by the implementation;
    callers treat them as two named entry points.
    """

    @abstractmethod
    def save(self, entity: E) -> E:
        """
        Store an entity.

        Args:
            entity: Entity to store

        Returns:
            The stored entity (with its id assigned)
        """
        pass

    @abstractmethod
    def persist(self, entity: E) -> E:
        """
        Write the state of an entity, merging it with any stored copy.

        Args:
            entity: Entity carrying the new state

        Returns:
            The stored entity
        """
        pass

    @abstractmethod
    def find_by_id(self, entity_id: int) -> Optional[E]:
        """
        Look up an entity by id.

        Returns:
            The entity, or None if no entity has that id
        """
        pass

    @abstractmethod
    def find_all(self) -> List[E]:
        """Return every stored entity."""
        pass

    @abstractmethod
    def delete_by_id(self, entity_id: int) -> None:
        """Remove the entity with the given id."""
        pass

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every stored entity."""
        pass
