"""
Bounded-concurrency fan-out helper shared by batch paths.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def process_in_parallel(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    limit: int = 5,
    return_exceptions: bool = False,
) -> list[R | BaseException]:
    """Run ``worker`` over ``items`` with at most ``limit`` in flight.

    Results keep the order of ``items``. With ``return_exceptions`` a failing
    item yields its exception instead of cancelling the rest.
    """
    if limit <= 0:
        raise ValueError("limit must be > 0")
    semaphore = asyncio.Semaphore(limit)

    async def _run(item: T) -> R:
        async with semaphore:
            return await worker(item)

    tasks = [_run(item) for item in items]
    return list(await asyncio.gather(*tasks, return_exceptions=return_exceptions))


__all__ = ["process_in_parallel"]
