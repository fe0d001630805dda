"""
TTL caching for repository read models.

Provides an in-memory, process-lifetime key/value store with time-to-live.
Expiry is lazy: an entry is only checked (and evicted) when it is read.

Cache durations are tuned per repository based on how fast the data moves:
- Users: 5 minutes (group membership and registration rarely change)
- Contributions and dashboards: 1 minute (editors are actively editing)
- Impact metrics: 1 hour (pageviews are published daily)
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cachetools import LRUCache  # type: ignore[import-untyped]

from wikidash.core.rate_limit import Clock

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAXSIZE = 512


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the clock reading at which it was stored."""

    data: T
    timestamp: float


class TTLCache(Generic[T]):
    """Expiring key -> value store owned by a single repository.

    Values are wrapped in CacheEntry and kept in a cachetools LRUCache
    bounded by ``maxsize``. An entry is valid while
    ``now - timestamp <= ttl``; the read that finds it stale evicts it.
    """

    def __init__(
        self,
        ttl: float,
        maxsize: int = DEFAULT_MAXSIZE,
        timer: Clock = time.monotonic,
        name: str = "cache",
    ) -> None:
        self.ttl = ttl
        self.name = name
        self._timer = timer
        self._store: LRUCache[str, CacheEntry[T]] = LRUCache(maxsize=maxsize)

    def get(self, key: str) -> T | None:
        """Return the value for ``key``, or None when absent or expired."""
        entry = self.get_entry(key)
        if entry is None:
            logger.debug(f"Cache MISS: {self.name}[{key}]")
            return None
        logger.debug(f"Cache HIT: {self.name}[{key}]")
        return entry.data

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        """Like get(), but returns the entry with its storage timestamp."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._timer() - entry.timestamp > self.ttl:
            self._store.pop(key, None)
            return None
        return entry

    def set(self, key: str, value: T) -> None:
        """Store ``value`` under ``key`` with a fresh timestamp."""
        self._store[key] = CacheEntry(data=value, timestamp=self._timer())

    def invalidate(self, key: str) -> None:
        """Remove a single entry (no-op when absent)."""
        self._store.pop(key, None)

    def clear(self) -> None:
        """Remove every entry."""
        self._store.clear()
        logger.debug(f"Cleared cache {self.name}")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_entry(key) is not None

    def __len__(self) -> int:
        return len(self._store)

    def stats(self) -> dict[str, Any]:
        """Get current cache statistics for monitoring."""
        return {"size": len(self._store), "maxsize": self._store.maxsize, "ttl": self.ttl}
