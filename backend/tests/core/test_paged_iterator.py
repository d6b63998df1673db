"""Lazy Paged Iterator — verifies streaming, fetch cadence and source misbehaviour.

Tests:
    - A deterministic slicing source is reproduced exactly, in order
    - fetch_page is called ceil(total / page_size) times, at page boundaries
    - Explicit next() after the end raises ExhaustedError, however often it is called
    - The counted end is a plain StopIteration; a shrunk source fails list() and for loops
    - An oversized page raises InvariantViolationError on the receiving call
    - A source that shrinks below total_count raises ExhaustedError
    - `for` loops stop cleanly at the end
"""

import math

import pytest

from contractdesk.core.errors import ExhaustedError, InvariantViolationError
from contractdesk.core.paged_iterator import LazyPagedIterator


class SlicingSource:
    """Page fetcher over an in-memory list that records every call."""

    def __init__(self, items):
        self.items = list(items)
        self.calls = []

    def __call__(self, offset, limit):
        self.calls.append((offset, limit))
        return self.items[offset:offset + limit]


@pytest.mark.parametrize("total,page_size", [
    (0, 1), (1, 1), (5, 1), (5, 2), (6, 3), (7, 10), (100, 7),
])
def test_reproduces_reference_sequence(total, page_size):
    reference = [f"item-{i}" for i in range(total)]
    source = SlicingSource(reference)
    iterator = LazyPagedIterator(page_size, total, source)

    assert list(iterator) == reference
    assert len(source.calls) == math.ceil(total / page_size)


def test_fetches_only_at_page_boundaries():
    source = SlicingSource(range(5))
    iterator = LazyPagedIterator(2, 5, source)

    assert next(iterator) == 0
    assert source.calls == [(0, 2)]
    assert next(iterator) == 1
    assert source.calls == [(0, 2)]
    assert next(iterator) == 2
    assert source.calls == [(0, 2), (2, 2)]


def test_has_next_tracks_position():
    iterator = LazyPagedIterator(3, 2, SlicingSource("ab"))
    assert iterator.has_next()
    next(iterator)
    next(iterator)
    assert iterator.position == 2
    assert not iterator.has_next()


def test_next_after_end_always_exhausted():
    iterator = LazyPagedIterator(2, 1, SlicingSource(["only"]))
    assert next(iterator) == "only"
    for _ in range(3):
        with pytest.raises(ExhaustedError):
            iterator.next()


def test_empty_source_is_exhausted_immediately():
    source = SlicingSource([])
    iterator = LazyPagedIterator(10, 0, source)
    with pytest.raises(ExhaustedError):
        iterator.next()
    assert source.calls == []


def test_oversized_page_is_an_invariant_violation():
    iterator = LazyPagedIterator(2, 4, lambda offset, limit: [1, 2, 3])
    with pytest.raises(InvariantViolationError):
        next(iterator)


def test_source_shrinking_below_count_is_exhausted():
    source = SlicingSource(range(3))
    iterator = LazyPagedIterator(2, 5, source)
    assert [next(iterator) for _ in range(3)] == [0, 1, 2]
    with pytest.raises(ExhaustedError):
        next(iterator)


def test_empty_page_despite_count_is_exhausted():
    iterator = LazyPagedIterator(2, 3, lambda offset, limit: [])
    with pytest.raises(ExhaustedError):
        next(iterator)


def test_total_count_is_a_snapshot():
    source = SlicingSource(range(3))
    iterator = LazyPagedIterator(2, 3, source)
    source.items.extend(range(3, 10))
    assert list(iterator) == [0, 1, 2]
    assert iterator.total_count == 3


def test_not_restartable():
    iterator = LazyPagedIterator(2, 2, SlicingSource("xy"))
    assert list(iterator) == ["x", "y"]
    assert list(iterator) == []


def test_counted_end_is_a_plain_stop():
    iterator = LazyPagedIterator(2, 1, SlicingSource(["only"]))
    next(iterator)
    with pytest.raises(StopIteration) as stopped:
        next(iterator)
    assert not isinstance(stopped.value, ExhaustedError)


def test_shrunk_source_fails_list():
    iterator = LazyPagedIterator(2, 5, SlicingSource(range(3)))
    with pytest.raises(ExhaustedError):
        list(iterator)


def test_shrunk_source_fails_for_loop():
    seen = []
    with pytest.raises(ExhaustedError):
        for item in LazyPagedIterator(2, 5, SlicingSource(range(3))):
            seen.append(item)
    assert seen == [0, 1, 2]


def test_shrunk_source_fails_inside_generator():
    iterator = LazyPagedIterator(2, 4, SlicingSource(range(2)))

    def relay():
        while iterator.has_next():
            yield next(iterator)

    with pytest.raises(ExhaustedError):
        list(relay())


def test_exhausted_is_not_a_stop_iteration():
    assert not issubclass(ExhaustedError, StopIteration)


@pytest.mark.parametrize("page_size,total", [(0, 1), (-1, 1), (1, -1)])
def test_invalid_construction_rejected(page_size, total):
    with pytest.raises(ValueError):
        LazyPagedIterator(page_size, total, SlicingSource([]))
