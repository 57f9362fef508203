"""Bounded-concurrency helpers shared by the feed, scrape, summary and write stages."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def parallel_limit(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    limit: int = 10,
) -> list[R]:
    """Run ``fn`` over ``items`` with at most ``limit`` calls in flight.

    ``results[i]`` always corresponds to ``items[i]``, whatever order the
    calls finish in. Errors are not caught here: the first failure cancels
    the remaining calls and is re-raised, so callers that need per-item
    isolation wrap ``fn`` themselves.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if not items:
        return []

    results: list[R | None] = [None] * len(items)
    semaphore = asyncio.Semaphore(limit)

    async def run(index: int, item: T) -> None:
        async with semaphore:
            results[index] = await fn(item)

    tasks = [asyncio.ensure_future(run(index, item)) for index, item in enumerate(items)]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return results  # type: ignore[return-value]
