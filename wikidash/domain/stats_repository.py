import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from wikidash.core.cache import TTLCache
from wikidash.domain.analysis import build_daily_activity
from wikidash.domain.contribution_repository import HISTORY_LIMIT, ContributionRepository
from wikidash.models.contribution import ContributionType
from wikidash.models.stats import DailyActivity, EditorStats
from wikidash.services.wikimedia.stats_client import XToolsStatsClient

logger = logging.getLogger(__name__)

STATS_CACHE_TTL = 60  # 1 min

# Contributions sampled for the per-type counters
STATS_SAMPLE_SIZE = 100


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StatsRepository:
    """Editor counters, combining the statistics API with contribution history."""

    def __init__(
        self,
        stats_client: XToolsStatsClient,
        contribution_repo: ContributionRepository,
        cache: TTLCache[EditorStats] | None = None,
        activity_days: int = 30,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.stats_client = stats_client
        self.contribution_repo = contribution_repo
        self.cache: TTLCache[EditorStats] = (
            cache if cache is not None else TTLCache(STATS_CACHE_TTL, name="stats")
        )
        self.activity_days = activity_days
        self._now = now

    async def get_editor_stats(
        self, username: str, activity_days: int | None = None
    ) -> EditorStats:
        """
        Get counters for a user.

        The statistics-API edit count and the contribution sample are
        fetched concurrently; either failing fails the whole call.

        Args:
            username: Wiki username
            activity_days: Length of the recent-activity window
                (defaults to the repository's window)
        """
        days = activity_days or self.activity_days
        cache_key = f"{username}:{days}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        edit_count, contributions = await asyncio.gather(
            self.stats_client.get_edit_count(username),
            self.contribution_repo.get_recent_contributions(username, STATS_SAMPLE_SIZE),
        )
        recent_activity = await self.get_daily_activity(username, days)

        counts = {t: 0 for t in ContributionType}
        for c in contributions:
            counts[c.type] += 1

        stats = EditorStats(
            total_edits=edit_count.live_edit_count,
            articles_created=counts[ContributionType.NEW_ARTICLE],
            major_expansions=counts[ContributionType.MAJOR_EXPANSION],
            minor_edits=counts[ContributionType.MINOR_EDIT],
            talk_page_posts=counts[ContributionType.TALK_PAGE],
            recent_activity=recent_activity,
        )

        self.cache.set(cache_key, stats)
        return stats

    async def get_daily_activity(
        self, username: str, days: int = 30
    ) -> tuple[DailyActivity, ...]:
        """Per-day edit counts and bytes added over the last ``days`` days."""
        contributions = await self.contribution_repo.get_recent_contributions(
            username, HISTORY_LIMIT
        )
        return build_daily_activity(contributions, days=days, now=self._now())
