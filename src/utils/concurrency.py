"""Bounded fan-out helper for outbound API calls."""

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 10


async def gather_bounded(
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
    limit: int = DEFAULT_CONCURRENCY,
) -> list[R | BaseException]:
    """Run func over items with at most `limit` calls in flight.

    Results keep input order. Exceptions are returned in place of results
    so one failed call never cancels its siblings.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def run(item: T) -> R:
        async with semaphore:
            return await func(item)

    return await asyncio.gather(*(run(item) for item in items), return_exceptions=True)
