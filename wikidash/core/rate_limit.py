"""Outbound request spacing for upstream API clients.

Each transport client owns one RateLimiter. Every attempt (retries
included) passes through ``acquire()``, which guarantees that request
starts through the same limiter are at least ``min_interval`` seconds
apart. Separate limiter instances never block each other.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeAlias

logger = logging.getLogger(__name__)

# Type aliases for the injectable time sources
Clock: TypeAlias = Callable[[], float]
Sleeper: TypeAlias = Callable[[float], Awaitable[None]]


class RateLimiter:
    """Minimum-interval gate for a single upstream API.

    Slots are reserved synchronously before sleeping, so concurrent callers
    on the same event loop are served in call order and each one waits for
    the slot after the previous reservation.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: float | None = None

    @property
    def last_request(self) -> float | None:
        """Start time of the most recent request slot handed out."""
        return self._last_request

    async def acquire(self) -> float:
        """Wait for the next request slot.

        Returns:
            Seconds the caller was suspended (0.0 when no wait was needed)
        """
        now = self._clock()
        scheduled = now
        if self._last_request is not None:
            scheduled = max(now, self._last_request + self.min_interval)
        self._last_request = scheduled

        delay = scheduled - now
        if delay > 0:
            logger.debug(f"Rate limit: waiting {delay:.3f}s before next request")
            await self._sleep(delay)
        return delay
