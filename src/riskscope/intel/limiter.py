"""Async rate limiter: concurrency cap, token reservoir and minimum spacing."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Throttle calls to one external service.

    Usage::

        async with limiter:
            resp = await client.get(...)

    Args:
        max_concurrent: Calls allowed in flight at once
        reservoir: Calls allowed per ``refill_interval`` (None = unbounded)
        refill_interval: Seconds after which the reservoir is refilled
        min_interval: Minimum seconds between two call starts
    """

    def __init__(
        self,
        max_concurrent: int = 1,
        reservoir: int | None = None,
        refill_interval: float = 30.0,
        min_interval: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_concurrent = max_concurrent
        self.reservoir = reservoir
        self.refill_interval = refill_interval
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._lock = asyncio.Lock()
        self._tokens = reservoir
        self._refilled_at: float | None = None
        self._last_start: float | None = None

    async def __aenter__(self) -> RateLimiter:
        await self._semaphore.acquire()
        try:
            await self._take_slot()
        except BaseException:
            self._semaphore.release()
            raise
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self._semaphore.release()

    async def _take_slot(self) -> None:
        async with self._lock:
            while True:
                now = self._clock()
                wait = self._wait_time(now)
                if wait <= 0:
                    break
                logger.debug("Rate limit reached, waiting %.1f seconds", wait)
                await self._sleep(wait)

            if self._tokens is not None:
                self._tokens -= 1
            self._last_start = now

    def _wait_time(self, now: float) -> float:
        if self.reservoir is not None:
            if self._refilled_at is None or now - self._refilled_at >= self.refill_interval:
                self._tokens = self.reservoir
                self._refilled_at = now
            if self._tokens is not None and self._tokens <= 0:
                return self._refilled_at + self.refill_interval - now

        if self.min_interval and self._last_start is not None:
            return self._last_start + self.min_interval - now
        return 0.0
