import sys
from pathlib import Path

# Add backend directory to Python path FIRST
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Now import after path is set
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from database import init_database
import entities  # noqa: F401  registers test tables on Base.metadata


@pytest.fixture
def engine():
    """In-memory database engine with all tables created"""
    engine = create_engine('sqlite:///:memory:')
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    """Create in-memory database session for testing"""
    session = session_factory()
    yield session
    session.close()
