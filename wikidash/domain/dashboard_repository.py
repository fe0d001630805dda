"""
Dashboard aggregation.

Assembles the EditorDashboard read model from the user, stats and
contribution repositories. The three lookups run concurrently; the first
failure fails the whole refresh and nothing is cached, so a dashboard is
never served half-built.
"""

import asyncio
import logging
from datetime import UTC, datetime

from wikidash.config.dashboard import DEFAULT_CONFIG, DashboardConfig
from wikidash.core.cache import TTLCache
from wikidash.core.exceptions import AggregateFailure
from wikidash.domain.contribution_repository import ContributionRepository
from wikidash.domain.stats_repository import StatsRepository
from wikidash.domain.user_repository import UserRepository
from wikidash.models.dashboard import EditorDashboard

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_TTL = 60  # 1 min


class DashboardRepository:
    """Cached EditorDashboard per username and config."""

    def __init__(
        self,
        users: UserRepository,
        contributions: ContributionRepository,
        stats: StatsRepository,
        config: DashboardConfig = DEFAULT_CONFIG,
        cache: TTLCache[EditorDashboard] | None = None,
    ):
        self.users = users
        self.contributions = contributions
        self.stats = stats
        self.config = config
        self.cache: TTLCache[EditorDashboard] = (
            cache if cache is not None else TTLCache(DASHBOARD_CACHE_TTL, name="dashboards")
        )

    def cache_key(self, username: str) -> str:
        """Cache key: username plus the config fields that shape the aggregate."""
        return (
            f"{username}:{self.config.max_recent_contributions}:{self.config.activity_days}"
        )

    async def get_dashboard(self, username: str) -> EditorDashboard:
        """Return the cached dashboard, refreshing it on a miss."""
        cached = self.cache.get(self.cache_key(username))
        if cached is not None:
            return cached
        return await self.refresh_dashboard(username)

    async def refresh_dashboard(self, username: str) -> EditorDashboard:
        """
        Rebuild the dashboard from upstream and cache it.

        Raises:
            AggregateFailure: If any of the three lookups failed. The
                original error is chained as ``__cause__``.
        """
        logger.info(f"Refreshing dashboard for {username}")
        try:
            user, stats, recent = await asyncio.gather(
                self.users.get_user(username),
                self.stats.get_editor_stats(username, self.config.activity_days),
                self.contributions.get_recent_contributions(
                    username, self.config.max_recent_contributions
                ),
            )
        except Exception as e:
            logger.warning(f"Dashboard refresh failed for {username}: {e}")
            raise AggregateFailure("refresh_dashboard", username, e) from e

        dashboard = EditorDashboard(
            user=user,
            stats=stats,
            recent_contributions=recent,
            last_updated=datetime.now(UTC),
        )
        self.cache.set(self.cache_key(username), dashboard)
        return dashboard

    def invalidate(self, username: str) -> None:
        """Drop the cached dashboard so the next read rebuilds it."""
        self.cache.invalidate(self.cache_key(username))
