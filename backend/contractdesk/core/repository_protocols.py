"""Boundary Protocols — the narrow relational-store contract the core relies on.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every IO operation of the data layer goes through RelationalStore
    - run_transaction rolls back entirely on any failure inside the unit
    - execute returns the affected-row count; callers treat != 1 as failure
      for update-one / insert-one statements

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass any fake store
    - Query/statement/session types stay opaque (object, Any) so core never
      depends on SQLAlchemy
    - Repositories and ExclusiveActivation are typed against this protocol;
      only Storage names the SQL implementation
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

from contractdesk.core.paged_iterator import LazyPagedIterator, PageFetcher

E = TypeVar("E")
T = TypeVar("T")


@runtime_checkable
class RelationalStore(Protocol):
    """Executes queries and transactional units of work."""

    def count_rows(self, query: object) -> int: ...

    def fetch_page(
        self,
        query: object,
        loader: Callable[[object], E],
        offset: int,
        limit: int,
    ) -> Sequence[E]: ...

    def page_fetcher(
        self, query: object, loader: Callable[[object], E],
    ) -> PageFetcher: ...

    def iterate(
        self, query: object, loader: Callable[[object], E], page_size: int,
    ) -> LazyPagedIterator[E]: ...

    def fetch_all(
        self, query: object, loader: Callable[[object], E],
    ) -> list[E]: ...

    def fetch_one(
        self, query: object, loader: Callable[[object], E],
    ) -> E | None: ...

    def run_transaction(self, unit_of_work: Callable[[Any], T]) -> T: ...

    def execute(self, statement: object) -> int: ...

    def execute_one(self, statement: object, operation: str) -> None: ...
