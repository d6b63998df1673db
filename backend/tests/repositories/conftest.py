"""Repository test fixtures — one in-memory SQLite database per test.

Invariants:
    - Every test gets a fresh database with every table created
    - The session manager is bound BEFORE create_all, so the SQLite
      foreign-key pragma is active on the only connection
    - Seed fixtures register through the repositories, never through raw rows

Design Decisions:
    - StaticPool: one shared connection, otherwise each checkout of
      "sqlite://" would see its own empty database
    - raw_session reads rows behind the repositories' back to check side effects
"""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from contractdesk.db.base import Base
from contractdesk.db.session import create_session_factory
from contractdesk.infrastructure.database import DatabaseSessionManager
from contractdesk.storage import Storage
import contractdesk.models  # noqa: F401


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def manager(test_engine):
    manager = DatabaseSessionManager.from_engine(test_engine)
    Base.metadata.create_all(test_engine)
    yield manager
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def storage(manager):
    return Storage(manager, page_size=2, default_estimation_minutes=60)


@pytest.fixture
def raw_session(manager, test_engine):
    factory = create_session_factory(engine=test_engine)
    with factory() as session:
        yield session


@pytest.fixture
def project(storage):
    return storage.projects.register(
        "acme/widgets", "github", "wile", "hook-token-1",
    )


@pytest.fixture
def other_project(storage):
    return storage.projects.register(
        "acme/gadgets", "github", "wile", "hook-token-2",
    )


@pytest.fixture
def alice(storage):
    return storage.contributors.register("alice", "github")


@pytest.fixture
def bob(storage):
    return storage.contributors.register("bob", "github")


@pytest.fixture
def dev_contract(storage, project, alice):
    return storage.contracts.add(
        project.repo_full_name, alice.username, "github", Decimal("25.00"), "DEV",
    )
