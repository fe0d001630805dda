"""Retry with exponential backoff for upstream API calls.

Wraps any async operation. Errors are classified through
``ApiError.is_retryable``; anything that is not an ApiError is treated as
fatal and re-raised untouched.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from wikidash.core.exceptions import ApiError
from wikidash.core.rate_limit import Sleeper

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(error: BaseException) -> bool:
    """Check whether an error should be retried."""
    return isinstance(error, ApiError) and error.is_retryable


class RetryExecutor:
    """Runs an operation until it succeeds or the attempt budget runs out.

    Backoff before retry ``attempt + 1`` is ``initial_backoff * 2**attempt``
    seconds plus uniform jitter in ``[0, jitter)``. A Retry-After value on
    the failed attempt replaces the computed delay, without jitter.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_backoff: float = 1.0,
        jitter: float = 1.0,
        sleep: Sleeper = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        _validate_attempts(max_attempts)
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff
        self.jitter = jitter
        self._sleep = sleep
        self._rand = rand

    def base_delay(self, attempt: int) -> float:
        """Backoff for a 0-indexed failed attempt, without jitter."""
        return self.initial_backoff * (2**attempt)

    def compute_delay(self, attempt: int, error: BaseException | None = None) -> float:
        """Delay to wait after failed attempt ``attempt`` before the next one."""
        retry_after = error.retry_after if isinstance(error, ApiError) else None
        if retry_after is not None:
            return float(max(0, retry_after))
        return self.base_delay(attempt) + self._rand() * self.jitter

    async def execute(
        self,
        operation: Callable[[int], Awaitable[T]],
        max_attempts: int | None = None,
    ) -> T:
        """
        Invoke ``operation(attempt)`` with retries.

        Args:
            operation: Async callable receiving the 0-indexed attempt number
            max_attempts: Override of the configured attempt budget

        Returns:
            The first successful result

        Raises:
            The fatal error as soon as it occurs, or the last retryable error
            once the budget is exhausted
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        _validate_attempts(attempts)

        attempt = 0
        while True:
            try:
                return await operation(attempt)
            except Exception as e:
                if not is_retryable(e):
                    raise
                if attempt >= attempts - 1:
                    logger.error(f"Giving up after {attempts} attempt(s): {e}")
                    raise

                delay = self.compute_delay(attempt, e)
                logger.warning(
                    f"Retryable error on attempt {attempt + 1}/{attempts}: "
                    f"{type(e).__name__}: {e}. Retrying in {delay:.2f}s"
                )
                await self._sleep(delay)
                attempt += 1


def _validate_attempts(max_attempts: int) -> None:
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ValueError(f"max_attempts must be a positive integer, got {max_attempts!r}")
