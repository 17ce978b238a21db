from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from config.settings import Settings, get_settings
from constants import DatabaseDefaults


def build_engine(settings: Settings) -> Engine:
    """Create an engine for the configured database URL."""
    connect_args = {}
    if settings.database_url.startswith('sqlite'):
        connect_args['check_same_thread'] = False
        if settings.database_url == DatabaseDefaults.URL:
            DatabaseDefaults.DB_DIR.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        settings.database_url,
        connect_args=connect_args,
        echo=settings.sql_echo,
        pool_pre_ping=DatabaseDefaults.POOL_PRE_PING,
        pool_recycle=DatabaseDefaults.POOL_RECYCLE,
    )

    if engine.dialect.name == 'sqlite':
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(get_settings())

SessionLocal = sessionmaker(bind=engine, autoflush=False)
Base = declarative_base()


def init_database(bind: Engine = engine) -> None:
    """Create all tables registered on Base"""
    Base.metadata.create_all(bind=bind)


def get_db():
    """Dependency for FastAPI routes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(read_only: bool = False, session_factory=None) -> Iterator[Session]:
    """
    Run a block of work inside one transaction.

    Commits on normal exit, rolls back on exception (and re-raises).
    Read-only scopes always roll back. The session is always closed.

    Args:
        read_only: Roll back instead of committing on exit
        session_factory: Session factory to use (defaults to SessionLocal)

    Example:
        with session_scope() as db:
            service = CrudService(EntityRepository(db, Circle))
            await service.save(circle)
    """
    factory = session_factory or SessionLocal
    db = factory()
    try:
        yield db
        if read_only:
            db.rollback()
        else:
            db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
