"""Bounded-concurrency helpers for the scrape services.

Transcript extraction itself is synchronous and stateless; the only place
parallelism matters is fetching many game pages.  ``throttled_gather`` is a
drop-in replacement for ``asyncio.gather`` that limits how many of those
fetches are in flight at once so the archive is not hammered.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")

_DEFAULT_MAX_CONCURRENCY = 2


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with semaphore throttling.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Semaphore for concurrency control.  A fresh semaphore allowing
        ``_DEFAULT_MAX_CONCURRENCY`` slots is created per call when omitted,
        so no state is shared between unrelated batches.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    if semaphore is None:
        semaphore = asyncio.Semaphore(_DEFAULT_MAX_CONCURRENCY)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
