"""Lazy Paged Iterator — streams an unbounded result set one page at a time.

Invariants:
    - total_count is snapshotted at construction, never re-queried mid-iteration
    - At most one page is held in memory
    - fetch_page(position, page_size) is called exactly when position % page_size == 0
    - A page longer than page_size raises InvariantViolationError on the call receiving it
    - An empty page while has_next() is true raises ExhaustedError
    - Elements come back in the order the fetch callback yields them; no reordering

Design Decisions:
    - Not restartable: __iter__ returns self, a fresh iterator is needed to iterate again
    - __next__ raises a plain StopIteration only at the counted end; a source
      that ran dry raises ExhaustedError through `for` loops and list() too
    - next() is the explicit call: past the end it raises ExhaustedError
"""

import logging
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from contractdesk.core.errors import (
    ErrorContext, ExhaustedError, InvariantViolationError,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")

PageFetcher = Callable[[int, int], Sequence[E]]


class LazyPagedIterator(Generic[E]):
    """Iterator over a page-fetch callback bounded by a fixed record count."""

    def __init__(
        self, page_size: int, total_count: int, fetch_page: PageFetcher,
    ):
        if page_size < 1:
            raise ValueError(f"Page size must be > 0, got {page_size}")
        if total_count < 0:
            raise ValueError(f"Total count must be >= 0, got {total_count}")
        self._page_size = page_size
        self._total_count = total_count
        self._fetch_page = fetch_page
        self._position = 0
        self._page: Sequence[E] = ()

    @property
    def position(self) -> int:
        return self._position

    @property
    def total_count(self) -> int:
        return self._total_count

    def has_next(self) -> bool:
        return self._position < self._total_count

    def __iter__(self) -> "LazyPagedIterator[E]":
        return self

    def __next__(self) -> E:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def next(self) -> E:
        """Next element; ExhaustedError past the end or when the source ran dry."""
        if not self.has_next():
            raise ExhaustedError()
        index = self._position % self._page_size
        if index == 0:
            fetched = self._fetch_page(self._position, self._page_size)
            if len(fetched) > self._page_size:
                raise InvariantViolationError(
                    "Fetched page is larger than the requested page size: "
                    f"{len(fetched)} > {self._page_size}.",
                    ErrorContext(
                        operation="fetch_page",
                        debug_info={"offset": self._position},
                    ),
                )
            self._page = fetched
        if index >= len(self._page):
            logger.warning(
                f"Page source ran dry at position {self._position} "
                f"of {self._total_count}",
            )
            raise ExhaustedError(
                f"Source returned no record for position {self._position} "
                f"although {self._total_count} were counted.",
            )
        self._position += 1
        return self._page[index]
