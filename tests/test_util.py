import asyncio

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chessexplorer.util import (
    adedup_by_key,
    dedup_by_key,
    midpoint,
    run_blocking,
    sort_by_key_and_truncate,
)

U16 = st.integers(min_value=0, max_value=0xFFFF)


def test_midpoint_value():
    assert midpoint(2000, 2200) == 2100


@given(U16, U16)
def test_midpoint_between(a, b):
    assert min(a, b) <= midpoint(a, b) <= max(a, b)
    assert midpoint(a, b) == midpoint(b, a)


def test_midpoint_large():
    assert midpoint(0xFFFF, 0xFFFF) == 0xFFFF


@given(st.lists(st.integers()), st.integers(min_value=0, max_value=50))
def test_sort_and_truncate_invariants(values, num):
    items = list(values)
    sort_by_key_and_truncate(items, num, key=lambda x: x)
    assert len(items) == min(num, len(values))
    assert all(a <= b for a, b in zip(items, items[1:]))
    dropped = list(values)
    for item in items:
        dropped.remove(item)
    assert all(kept <= other for kept in items for other in dropped)


def test_sort_and_truncate_descending_key():
    items = [(1, "a"), (3, "b"), (2, "c")]
    sort_by_key_and_truncate(items, 2, key=lambda pair: -pair[0])
    assert items == [(3, "b"), (2, "c")]


def test_dedup_by_key():
    assert list(dedup_by_key([1, 1, 2, 2, 1], key=lambda x: x)) == [1, 2, 1]


def test_dedup_by_derived_key():
    words = ["a", "b", "cc", "dd", "e"]
    result = list(dedup_by_key(words, key=len))
    assert [len(word) for word in result] == [1, 2, 1]
    assert result[0] == words[0]


async def _agen(items):
    for item in items:
        yield item


@pytest.mark.asyncio
async def test_adedup_matches_sync():
    items = [3, 3, 1, 2, 2, 2, 3]
    result = [item async for item in adedup_by_key(_agen(items), key=lambda x: x)]
    assert result == list(dedup_by_key(items, key=lambda x: x))


@pytest.mark.asyncio
async def test_run_blocking_returns_result():
    semaphore = asyncio.Semaphore(1)
    assert await run_blocking(semaphore, lambda: 42) == 42


@pytest.mark.asyncio
async def test_run_blocking_propagates_errors():
    semaphore = asyncio.Semaphore(1)

    def fail():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        await run_blocking(semaphore, fail)
    assert not semaphore.locked()