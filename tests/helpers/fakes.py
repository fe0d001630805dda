"""Deterministic time sources and builders for unit tests.

FakeClock stands in for both ``time.monotonic`` and ``asyncio.sleep``:
sleeping advances the clock instead of suspending, and every sleep is
recorded so tests can assert on backoff and rate-limit waits.
"""

from __future__ import annotations

from datetime import UTC, datetime

import httpx

from wikidash.core.rate_limit import RateLimiter
from wikidash.core.retry import RetryExecutor
from wikidash.models.contribution import Contribution, ContributionType
from wikidash.services.wikimedia.base_client import BaseApiClient


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_api_client(
    handler,
    base_url: str = "https://api.test",
    clock: FakeClock | None = None,
    max_attempts: int = 3,
    min_interval: float = 0.0,
    **kwargs: object,
) -> BaseApiClient:
    """BaseApiClient over httpx.MockTransport with fake sleeps and no jitter."""
    clock = clock or FakeClock()
    return BaseApiClient(
        base_url=base_url,
        transport=httpx.MockTransport(handler),
        rate_limiter=RateLimiter(min_interval, clock=clock, sleep=clock.sleep),
        retry_executor=RetryExecutor(
            max_attempts=max_attempts,
            initial_backoff=1.0,
            jitter=0.0,
            sleep=clock.sleep,
        ),
        **kwargs,
    )


def make_contribution(
    revision_id: int = 1,
    title: str = "Example",
    timestamp: datetime | None = None,
    type: ContributionType = ContributionType.MINOR_EDIT,
    byte_diff: int = 10,
    **overrides: object,
) -> Contribution:
    return Contribution(
        revision_id=revision_id,
        article_title=title,
        article_url=f"https://en.wikipedia.org/wiki/{title.replace(' ', '_')}",
        timestamp=timestamp or datetime(2026, 3, 10, 12, 0, tzinfo=UTC),
        type=type,
        byte_diff=byte_diff,
        summary=overrides.get("summary", ""),
        is_minor=overrides.get("is_minor", False),
        tags=overrides.get("tags", ()),
    )
