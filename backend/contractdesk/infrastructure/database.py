"""Database Session Manager — connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() commits only when the whole unit of work succeeded
    - IntegrityError maps to ConflictError on every backend (one conflict policy)
    - Other SQLAlchemy exceptions map to DatabaseError (core/errors.py)
    - ContractDeskError raised inside a unit passes through unchanged, after rollback

Design Decisions:
    - Manager is injected, never a module-level singleton
    - expire_on_commit=False: snapshots are built from rows after commit
    - pool_pre_ping for stale connection detection on server backends
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker

from contractdesk.core.errors import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self._bind(create_engine(database_url, **engine_kwargs))

    @classmethod
    def from_engine(cls, engine: Engine) -> "DatabaseSessionManager":
        """Wrap an already-configured engine (tests, embedded SQLite)."""
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: Engine) -> None:
        self.engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(
            self.engine,
            class_=Session,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            session.rollback()
            logger.error(f"DB integrity error: {e}", extra={"error_code": "CONFLICT"})
            raise ConflictError(f"Duplicate or conflicting row: {e.orig}")
        except OperationalError as e:
            session.rollback()
            logger.error(
                f"DB operational error: {e}", extra={"error_code": "DATABASE_ERROR"},
            )
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            session.rollback()
            logger.error(
                f"DB driver error: {e}", extra={"error_code": "DATABASE_ERROR"},
            )
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Single unit of work: commit on success, full rollback on any failure."""
        with self.session() as session:
            with session.begin():
                yield session

    def health_check(self) -> bool:
        """Check database connectivity (for readiness checks)."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
