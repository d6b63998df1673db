"""SQL Relational Store — the RelationalStore protocol over SQLAlchemy sessions.

Invariants:
    - count_rows counts exactly the rows the (unpaged) query would return
    - fetch_page opens a short-lived session per page; nothing stays open between pages
    - run_transaction is one unit of work: all writes commit together or none do
    - execute_one fails (and rolls back) unless exactly one row was affected

Design Decisions:
    - Page queries MUST carry an ORDER BY on a unique key, otherwise
      offset/limit windows are not stable; repositories order by primary key
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.base import Executable

from contractdesk.core.errors import ErrorContext, InvariantViolationError
from contractdesk.core.paged_iterator import LazyPagedIterator, PageFetcher
from contractdesk.infrastructure.database import DatabaseSessionManager

logger = logging.getLogger(__name__)

E = TypeVar("E")
T = TypeVar("T")


class SqlRelationalStore:
    """Executes queries and transactional units of work against one database."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    @property
    def manager(self) -> DatabaseSessionManager:
        return self._manager

    # ─── Reads ───────────────────────────────────────────────────

    def count_rows(self, query: Select) -> int:
        counting = select(func.count()).select_from(
            query.order_by(None).subquery(),
        )
        with self._manager.session() as db:
            return int(db.execute(counting).scalar_one())

    def fetch_page(
        self,
        query: Select,
        loader: Callable[[object], E],
        offset: int,
        limit: int,
    ) -> list[E]:
        with self._manager.session() as db:
            rows = db.execute(query.offset(offset).limit(limit)).scalars().all()
            return [loader(row) for row in rows]

    def page_fetcher(
        self, query: Select, loader: Callable[[object], E],
    ) -> PageFetcher:
        def fetch(offset: int, limit: int) -> list[E]:
            return self.fetch_page(query, loader, offset, limit)
        return fetch

    def iterate(
        self, query: Select, loader: Callable[[object], E], page_size: int,
    ) -> LazyPagedIterator[E]:
        """Lazy iterator over query; the row count is read once, here."""
        total = self.count_rows(query)
        logger.debug(f"Lazy iteration over {total} rows, page size {page_size}")
        return LazyPagedIterator(
            page_size, total, self.page_fetcher(query, loader),
        )

    def fetch_all(
        self, query: Select, loader: Callable[[object], E],
    ) -> list[E]:
        with self._manager.session() as db:
            return [loader(row) for row in db.execute(query).scalars().all()]

    def fetch_one(
        self, query: Select, loader: Callable[[object], E],
    ) -> E | None:
        with self._manager.session() as db:
            row = db.execute(query).scalars().first()
            return loader(row) if row is not None else None

    # ─── Writes ──────────────────────────────────────────────────

    def run_transaction(self, unit_of_work: Callable[[Session], T]) -> T:
        with self._manager.transaction() as db:
            return unit_of_work(db)

    def execute(self, statement: Executable) -> int:
        """Run one write statement in its own transaction; return affected rows."""
        with self._manager.transaction() as db:
            return db.execute(statement).rowcount

    def execute_one(self, statement: Executable, operation: str) -> None:
        """Run one write statement that must affect exactly one row."""
        self.run_transaction(
            lambda db: expect_one_row(db, statement, operation),
        )


def expect_one_row(db: Session, statement: Executable, operation: str) -> None:
    """Execute inside an open unit of work; any count but 1 aborts the unit."""
    affected = db.execute(statement).rowcount
    if affected != 1:
        raise InvariantViolationError(
            f"{operation} affected {affected} rows, expected exactly 1.",
            ErrorContext(operation=operation, debug_info={"affected": affected}),
        )
