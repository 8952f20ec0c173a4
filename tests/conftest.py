"""
Shared fixtures: in-memory database, fake clock and a fresh cache store per test.
"""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.cache import Cache, MemoryCacheBackend, set_cache_backend
from app.models import Base


class FakeClock:
    """Manually advanced clock (seconds since epoch)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class QueryCounter:
    """Counts SELECT statements sent to the database."""

    def __init__(self):
        self.selects = 0

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            self.selects += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    """Fresh process-wide store for the test."""
    store = MemoryCacheBackend(clock=clock)
    set_cache_backend(store)
    yield store
    set_cache_backend(None)


@pytest.fixture
def cache(backend):
    return Cache(backend=backend, enabled=True)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def query_counter(engine):
    counter = QueryCounter()
    event.listen(engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine, "before_cursor_execute", counter)


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    yield session
    session.close()
