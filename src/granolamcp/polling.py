"""Bounded poll-retry for cache fields that the app fills in later."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


async def poll_until_ready(
    fetch: Callable[[], Awaitable[T]],
    is_ready: Callable[[T], bool],
    *,
    timeout: float,
    interval: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Call fetch() until is_ready() accepts the result or timeout expires.

    Returns the last fetched result either way. Exceptions raised by fetch()
    end the loop immediately.
    """
    start = clock()
    attempt = 0
    while True:
        attempt += 1
        result = await fetch()
        if is_ready(result):
            return result
        elapsed = clock() - start
        if elapsed >= timeout:
            log.info("Gave up waiting after %d attempts (%.1fs)", attempt, elapsed)
            return result
        # Last wait is cut short so the final attempt lands on the deadline
        delay = min(interval, timeout - elapsed)
        log.debug("Attempt %d not ready, retrying in %.1fs", attempt, delay)
        await sleep(delay)
