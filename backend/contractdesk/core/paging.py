"""Page Cursor — pure math from (page number, page size) to offset/limit windows.

Invariants:
    - number >= 1, size >= 1 (ValueError otherwise)
    - offset = (number - 1) * size, limit = size
    - total_pages = ceil(total_count / size), and 1 when total_count == 0
    - Page.all() (size == MAX_PAGE_SIZE) is exactly one page holding every record
"""

import math
from dataclasses import dataclass

MAX_PAGE_SIZE: int = 2**31 - 1


@dataclass(frozen=True)
class Page:
    """A window into an ordered, stable result set. Never persisted."""
    number: int = 1
    size: int = MAX_PAGE_SIZE

    def __post_init__(self):
        if self.number < 1:
            raise ValueError(f"Page number must be >= 1, got {self.number}")
        if self.size < 1:
            raise ValueError(f"Page size must be >= 1, got {self.size}")

    @classmethod
    def all(cls) -> "Page":
        return cls(1, MAX_PAGE_SIZE)

    @property
    def is_all(self) -> bool:
        return self.number == 1 and self.size == MAX_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    def total_pages(self, total_count: int) -> int:
        return total_pages(total_count, self.size)

    def next(self) -> "Page":
        return Page(self.number + 1, self.size)


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for total_count records (at least 1)."""
    if total_count < 0:
        raise ValueError(f"Total count must be >= 0, got {total_count}")
    if page_size < 1:
        raise ValueError(f"Page size must be >= 1, got {page_size}")
    if total_count == 0:
        return 1
    return math.ceil(total_count / page_size)
