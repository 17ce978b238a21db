"""
End-to-end tests: CrudService over EntityRepository and an in-memory database,
with transactions demarcated by session_scope.
"""
import pytest

from constants import NotificationKind
from database import session_scope
from entities import Circle
from exceptions import EntityNotFoundError
from repositories import EntityRepository
from services.crud_service import CrudService


def kinds(notifications):
    return [n.kind for n in notifications]


@pytest.fixture
def service(db_session):
    return CrudService(EntityRepository(db_session, Circle))


@pytest.fixture
def seeded(service):
    """Two circles stored with ids 1 and 2"""
    first = service.save(Circle(radius=1.0)).blocking_get()
    second = service.save(Circle(radius=2.0)).blocking_get()
    assert (first.id, second.id) == (1, 2)
    return first, second


def test_lookup_and_delete_scenario(service, seeded):
    first, second = seeded

    found = service.find(1).materialize()
    assert kinds(found) == [NotificationKind.NEXT, NotificationKind.COMPLETE]
    assert found[0].value is first

    missing = service.find(3).materialize()
    assert kinds(missing) == [NotificationKind.ERROR]
    assert isinstance(missing[0].error, EntityNotFoundError)

    listed = service.find_all().materialize()
    assert kinds(listed) == [NotificationKind.NEXT, NotificationKind.COMPLETE]
    assert listed[0].value == [first, second]

    deleted = service.delete_by_id(1).materialize()
    assert kinds(deleted) == [NotificationKind.COMPLETE]

    remaining = service.find_all().materialize()
    assert kinds(remaining) == [NotificationKind.NEXT, NotificationKind.COMPLETE]
    assert remaining[0].value == [second]


def test_find_all_on_empty_database(service):
    notifications = service.find_all().materialize()

    assert kinds(notifications) == [NotificationKind.NEXT, NotificationKind.COMPLETE]
    assert notifications[0].value == []


def test_update_changes_stored_state(service, seeded):
    first, _ = seeded
    first.colour = 'green'

    updated = service.update(first).blocking_get()

    assert updated.colour == 'green'
    assert service.find(first.id).blocking_get().colour == 'green'


def test_database_error_reaches_error_channel(service):
    notifications = service.save(Circle(radius=None)).materialize()

    assert kinds(notifications) == [NotificationKind.ERROR]
    assert 'NOT NULL' in str(notifications[0].error)


def test_delete_all_then_find(service, seeded):
    assert kinds(service.delete_all().materialize()) == [NotificationKind.COMPLETE]

    notifications = service.find(2).materialize()

    assert kinds(notifications) == [NotificationKind.ERROR]
    assert isinstance(notifications[0].error, EntityNotFoundError)


@pytest.mark.asyncio
async def test_awaiting_operations(service):
    saved = await service.save(Circle(radius=5.0))

    assert (await service.find(saved.id)).radius == 5.0
    assert await service.delete_by_id(saved.id) is None
    assert await service.find_all() == []


class TestSessionScope:
    def test_commit_makes_writes_visible_to_new_session(self, session_factory):
        with session_scope(session_factory=session_factory) as db:
            CrudService(EntityRepository(db, Circle)).save(Circle(radius=1.5)).blocking_get()

        with session_scope(read_only=True, session_factory=session_factory) as db:
            circles = CrudService(EntityRepository(db, Circle)).find_all().blocking_get()
            radii = [c.radius for c in circles]

        assert radii == [1.5]

    def test_exception_rolls_back(self, session_factory):
        with pytest.raises(EntityNotFoundError):
            with session_scope(session_factory=session_factory) as db:
                service = CrudService(EntityRepository(db, Circle))
                service.save(Circle(radius=1.0)).blocking_get()
                service.find(99).blocking_get()

        with session_scope(read_only=True, session_factory=session_factory) as db:
            assert EntityRepository(db, Circle).count() == 0

    def test_read_only_scope_discards_writes(self, session_factory):
        with session_scope(read_only=True, session_factory=session_factory) as db:
            CrudService(EntityRepository(db, Circle)).save(Circle(radius=2.0)).blocking_get()

        with session_scope(read_only=True, session_factory=session_factory) as db:
            assert EntityRepository(db, Circle).count() == 0


def test_get_db_yields_and_closes_session(monkeypatch, session_factory):
    import database

    monkeypatch.setattr(database, 'SessionLocal', session_factory)
    generator = database.get_db()
    db = next(generator)

    assert EntityRepository(db, Circle).count() == 0

    with pytest.raises(StopIteration):
        next(generator)
