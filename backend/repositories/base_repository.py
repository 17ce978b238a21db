"""
Generic SQLAlchemy repository implementing IEntityRepository.
"""

from typing import Generic, List, Optional, Type
from sqlalchemy.orm import Session

from services.interfaces import E, IEntityRepository


class EntityRepository(IEntityRepository[E], Generic[E]):
    """
    Repository storing entities of one model class through a SQLAlchemy session.

    Writes are flushed so ids are assigned immediately, but never committed;
    the caller owns the transaction (see database.session_scope).
    SQLAlchemy errors propagate unchanged.
    """

    def __init__(self, db: Session, model: Type[E]):
        """
        Initialize the repository.

        Args:
            db: SQLAlchemy database session
            model: Mapped entity class
        """
        self.db = db
        self.model = model

    def save(self, entity: E) -> E:
        """
        Add the entity to the session and flush it.

        Returns:
            The same instance, with its id assigned
        """
        self.db.add(entity)
        self.db.flush()
        return entity

    def persist(self, entity: E) -> E:
        """
        Merge the entity's state into the session and flush it.

        The argument may be detached; the returned instance is the one
        attached to the session.

        Returns:
            The merged instance
        """
        merged = self.db.merge(entity)
        self.db.flush()
        return merged

    def find_by_id(self, entity_id: int) -> Optional[E]:
        """
        Retrieve an entity by its id.

        Returns:
            Entity instance or None if not found
        """
        return self.db.get(self.model, entity_id)

    def find_all(self) -> List[E]:
        """
        Retrieve all entities ordered by id.
        """
        return self.db.query(self.model).order_by(self.model.id).all()

    def delete_by_id(self, entity_id: int) -> None:
        """
        Delete the entity with the given id.

        A missing id is not an error.
        """
        entity = self.find_by_id(entity_id)
        if entity is not None:
            self.db.delete(entity)
            self.db.flush()

    def delete_all(self) -> None:
        """Delete every entity of this model."""
        self.db.flush()
        self.db.query(self.model).delete()

    def count(self) -> int:
        """
        Count stored entities.
        """
        return self.db.query(self.model).count()
