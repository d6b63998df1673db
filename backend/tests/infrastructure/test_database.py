"""Database Session Manager — verifies rollback, error mapping and health checks.

Invariants:
    - A failed unit of work leaves nothing behind
    - IntegrityError surfaces as ConflictError, other SQLAlchemy errors as DatabaseError
    - Domain errors raised inside a unit pass through unchanged
"""

import pytest
from sqlalchemy import create_engine, select, text
from sqlalchemy.pool import StaticPool

from contractdesk.core.errors import (
    ConflictError, DatabaseError, InvariantViolationError,
)
from contractdesk.core.repository_protocols import RelationalStore
from contractdesk.db.base import Base
from contractdesk.infrastructure.database import DatabaseSessionManager
from contractdesk.infrastructure.relational_store import SqlRelationalStore
from contractdesk.models import ContributorRow


@pytest.fixture
def manager():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    manager = DatabaseSessionManager.from_engine(engine)
    Base.metadata.create_all(engine)
    yield manager
    manager.dispose()


def _usernames(manager):
    with manager.session() as db:
        return list(db.execute(select(ContributorRow.username)).scalars())


def test_transaction_commits(manager):
    with manager.transaction() as db:
        db.add(ContributorRow(username="alice", provider="github"))
    assert _usernames(manager) == ["alice"]


def test_failed_unit_rolls_back(manager):
    with pytest.raises(InvariantViolationError):
        with manager.transaction() as db:
            db.add(ContributorRow(username="alice", provider="github"))
            db.flush()
            raise InvariantViolationError("abort")
    assert _usernames(manager) == []


def test_duplicate_key_is_conflict(manager):
    with manager.transaction() as db:
        db.add(ContributorRow(username="alice", provider="github"))
    with pytest.raises(ConflictError):
        with manager.transaction() as db:
            db.add(ContributorRow(username="alice", provider="github"))
    assert _usernames(manager) == ["alice"]


def test_broken_query_is_database_error(manager):
    with pytest.raises(DatabaseError):
        with manager.session() as db:
            db.execute(text("SELECT * FROM no_such_table"))


def test_foreign_keys_enforced_on_sqlite(manager):
    store = SqlRelationalStore(manager)
    with pytest.raises(ConflictError):
        store.execute(text(
            "INSERT INTO wallets (repo_full_name, provider, type, cash, identifier, active) "
            "VALUES ('ghost/repo', 'github', 'FAKE', 0, 'w', 0)"
        ))


def test_execute_one_requires_exactly_one_row(manager):
    store = SqlRelationalStore(manager)
    with pytest.raises(InvariantViolationError):
        store.execute_one(
            text("UPDATE contributors SET provider = 'gitlab' WHERE username = 'zed'"),
            "rename provider",
        )


def test_health_check_ok(manager):
    assert manager.health_check()


def test_health_check_unreachable_database():
    broken = DatabaseSessionManager("sqlite:////nonexistent-dir/nested/db.sqlite")
    assert not broken.health_check()


def test_server_url_gets_pool_settings():
    manager = DatabaseSessionManager(
        "postgresql+psycopg://u:p@localhost:1/db", pool_size=3, max_overflow=1,
    )
    assert manager.engine.pool.size() == 3
    manager.dispose()


def test_sql_store_satisfies_relational_store_protocol(manager):
    assert isinstance(SqlRelationalStore(manager), RelationalStore)
