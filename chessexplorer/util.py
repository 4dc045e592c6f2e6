"""Small helpers shared by the query code."""

from __future__ import annotations

import asyncio
import heapq
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from typing import Any, TypeVar

T = TypeVar("T")
R = TypeVar("R")

_UNSET: Any = object()


def midpoint(a: int, b: int) -> int:
    """Integer midpoint of two ratings, rounded down."""
    return (a + b) // 2


def sort_by_key_and_truncate(
    items: list[T], num: int, key: Callable[[T], Any]
) -> None:
    """Keep only the ``num`` smallest items by ``key``, in ascending order."""
    items[:] = heapq.nsmallest(min(num, len(items)), items, key=key)


def dedup_by_key(iterable: Iterable[T], key: Callable[[T], Any]) -> Iterator[T]:
    """Yield items, skipping those whose key equals the previous item's key."""
    latest = _UNSET
    for item in iterable:
        current = key(item)
        if latest is _UNSET or current != latest:
            yield item
        latest = current


async def adedup_by_key(
    aiterable: AsyncIterable[T], key: Callable[[T], Any]
) -> AsyncIterator[T]:
    """Asynchronous form of :func:`dedup_by_key`."""
    latest = _UNSET
    async for item in aiterable:
        current = key(item)
        if latest is _UNSET or current != latest:
            yield item
        latest = current


async def run_blocking(semaphore: asyncio.Semaphore, func: Callable[[], R]) -> R:
    """Run ``func`` in a worker thread while holding ``semaphore``."""
    async with semaphore:
        return await asyncio.to_thread(func)