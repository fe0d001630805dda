"""
Repository registry.

Built once at process start (FastAPI lifespan) and passed around explicitly.
Owns the three transport clients and one instance of every repository, so
every consumer shares the same caches: a dashboard repository handed out by
the registry sees the cache writes of every other one.
"""

import logging
import time
from dataclasses import dataclass, field

import httpx

from wikidash.config.dashboard import DashboardConfig
from wikidash.config.settings import Settings
from wikidash.config.settings import settings as default_settings
from wikidash.core.cache import TTLCache
from wikidash.core.rate_limit import Clock
from wikidash.domain.contribution_repository import ContributionRepository
from wikidash.domain.dashboard_repository import DashboardRepository
from wikidash.domain.impact_repository import ImpactRepository
from wikidash.domain.stats_repository import StatsRepository
from wikidash.domain.user_repository import UserRepository
from wikidash.models.dashboard import EditorDashboard
from wikidash.services.wikimedia.base_client import CredentialSupplier
from wikidash.services.wikimedia.metrics_client import PageviewsClient
from wikidash.services.wikimedia.query_client import WikipediaQueryClient
from wikidash.services.wikimedia.stats_client import XToolsStatsClient

logger = logging.getLogger(__name__)


@dataclass
class RepositoryRegistry:
    """Process-wide transport clients and repositories."""

    settings: Settings
    query_client: WikipediaQueryClient
    stats_client: XToolsStatsClient
    metrics_client: PageviewsClient
    users: UserRepository
    contributions: ContributionRepository
    stats: StatsRepository
    impact: ImpactRepository
    dashboard_cache: TTLCache[EditorDashboard]
    _dashboards: dict[DashboardConfig, DashboardRepository] = field(default_factory=dict)

    def dashboard_repository(self, config: DashboardConfig | None = None) -> DashboardRepository:
        """
        Get the dashboard repository for a config.

        Repositories borrow the shared user, stats and contribution
        repositories and the shared dashboard cache; one instance is kept
        per config.
        """
        config = config or DashboardConfig.from_settings(self.settings)
        repo = self._dashboards.get(config)
        if repo is None:
            repo = DashboardRepository(
                users=self.users,
                contributions=self.contributions,
                stats=self.stats,
                config=config,
                cache=self.dashboard_cache,
            )
            self._dashboards[config] = repo
        return repo

    def caches(self) -> dict[str, TTLCache]:
        return {
            "users": self.users.cache,
            "contributions": self.contributions.cache,
            "stats": self.stats.cache,
            "impact": self.impact.cache,
            "dashboards": self.dashboard_cache,
        }

    def clear_caches(self) -> None:
        for cache in self.caches().values():
            cache.clear()

    async def aclose(self) -> None:
        """Close all transport clients. Call on app shutdown."""
        await self.query_client.aclose()
        await self.stats_client.aclose()
        await self.metrics_client.aclose()
        logger.info("Closed Wikimedia API clients")


def build_registry(
    settings: Settings | None = None,
    credentials: CredentialSupplier | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timer: Clock = time.monotonic,
) -> RepositoryRegistry:
    """
    Construct every client, cache and repository exactly once.

    Args:
        settings: Application settings (module-level settings by default)
        credentials: Optional auth header supplier shared by all clients
        transport: Optional httpx transport for all clients (tests)
        timer: Clock shared by every cache
    """
    settings = settings or default_settings
    maxsize = settings.cache_maxsize

    query_client = WikipediaQueryClient.from_settings(
        settings, credentials=credentials, transport=transport
    )
    stats_client = XToolsStatsClient.from_settings(
        settings, credentials=credentials, transport=transport
    )
    metrics_client = PageviewsClient.from_settings(
        settings, credentials=credentials, transport=transport
    )

    users = UserRepository(
        query_client,
        cache=TTLCache(settings.user_cache_ttl, maxsize, timer, name="users"),
    )
    contributions = ContributionRepository(
        query_client,
        article_base_url=settings.wiki_article_base_url,
        cache=TTLCache(settings.contributions_cache_ttl, maxsize, timer, name="contributions"),
    )
    stats = StatsRepository(
        stats_client,
        contributions,
        cache=TTLCache(settings.stats_cache_ttl, maxsize, timer, name="stats"),
        activity_days=settings.dashboard_activity_days,
    )
    impact = ImpactRepository(
        metrics_client,
        query_client,
        cache=TTLCache(settings.impact_cache_ttl, maxsize, timer, name="impact"),
    )

    logger.info("Built repository registry")
    return RepositoryRegistry(
        settings=settings,
        query_client=query_client,
        stats_client=stats_client,
        metrics_client=metrics_client,
        users=users,
        contributions=contributions,
        stats=stats,
        impact=impact,
        dashboard_cache=TTLCache(settings.dashboard_cache_ttl, maxsize, timer, name="dashboards"),
    )
