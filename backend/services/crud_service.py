"""
CRUD Service

Generic base for services that create, read, update and delete entities of
a single type. Every operation delegates to the injected repository and
reports its outcome through a ResultStream instead of returning directly:

- save/update/find emit one entity, then complete
- find_all emits one list, then completes
- delete_by_id/delete_all only complete

Repository failures become the stream's error; they are never raised to the
caller. Nothing touches the repository until the stream is consumed.
Transactions are managed by the caller (see database.session_scope).
"""
import logging
from typing import Generic, List

from exceptions import EntityNotFoundError
from services.interfaces import E, IEntityRepository
from services.result_stream import ResultStream, StreamEmitter

logger = logging.getLogger(__name__)


class CrudService(Generic[E]):
    """
    Service offering create, read, update and delete operations for one entity type.

    Subclass it per entity type, or use it directly:

        service = CrudService(EntityRepository(db, Circle))
        circle = await service.save(Circle(radius=3))
    """

    def __init__(self, repository: IEntityRepository[E]):
        """
        Args:
            repository: Entity repository; shared, not owned by the service
        """
        self.repository = repository

    def _context(self, operation: str, **extra) -> dict:
        context = {
            "operation": operation,
            "service": type(self).__name__,
        }
        context.update(extra)
        return context

    def save(self, entity: E) -> ResultStream[E]:
        """
        Save the supplied entity.

        Returns:
            Stream that receives the saved entity, or the error raised by the repository
        """
        def call():
            logger.debug("Saving entity", extra=self._context("save"))
            return self.repository.save(entity)

        return ResultStream.from_callable(call)

    def update(self, entity: E) -> ResultStream[E]:
        """
        Update the supplied entity.

        Returns:
            Stream that receives the updated entity, or the error raised by the repository
        """
        def call():
            logger.debug("Updating entity", extra=self._context("update"))
            return self.repository.persist(entity)

        return ResultStream.from_callable(call)

    def find(self, entity_id: int) -> ResultStream[E]:
        """
        Find the entity having the supplied id.

        Returns:
            Stream that receives the entity; errors with EntityNotFoundError
            when no entity has that id, or with the repository's error
        """
        def producer(emitter: StreamEmitter[E]):
            try:
                logger.debug("Finding entity", extra=self._context("find", entity_id=entity_id))
                entity = self.repository.find_by_id(entity_id)
                if entity is not None:
                    emitter.on_next(entity)
                    emitter.on_complete()
                else:
                    emitter.on_error(EntityNotFoundError(entity_id))
            except Exception as e:
                emitter.on_error(e)

        return ResultStream.create(producer)

    def find_all(self) -> ResultStream[List[E]]:
        """
        Find all the entities.

        Returns:
            Stream that receives the list of entities (possibly empty), or the repository's error
        """
        def call():
            logger.debug("Finding all entities", extra=self._context("find_all"))
            return list(self.repository.find_all())

        return ResultStream.from_callable(call)

    def delete_by_id(self, entity_id: int) -> ResultStream[None]:
        """
        Delete the entity having the supplied id.

        Returns:
            Stream that only completes, or receives the repository's error
        """
        def action():
            logger.debug("Deleting entity", extra=self._context("delete_by_id", entity_id=entity_id))
            self.repository.delete_by_id(entity_id)

        return ResultStream.from_action(action)

    def delete_all(self) -> ResultStream[None]:
        """
        Delete all entities.

        Returns:
            Stream that only completes, or receives the repository's error
        """
        def action():
            logger.debug("Deleting all entities", extra=self._context("delete_all"))
            self.repository.delete_all()

        return ResultStream.from_action(action)
