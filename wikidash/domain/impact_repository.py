import logging

from wikidash.core.cache import TTLCache
from wikidash.services.wikimedia.metrics_client import PageviewsClient
from wikidash.services.wikimedia.query_client import WikipediaQueryClient
from wikidash.services.wikimedia.types import ImpactMetrics

logger = logging.getLogger(__name__)

IMPACT_CACHE_TTL = 3600  # 1 hour, pageviews are published daily


class ImpactRepository:
    """Readership of articles, from the pageview metrics API."""

    def __init__(
        self,
        metrics_client: PageviewsClient,
        query_client: WikipediaQueryClient,
        cache: TTLCache[ImpactMetrics] | None = None,
    ):
        self.metrics_client = metrics_client
        self.query_client = query_client
        self.cache: TTLCache[ImpactMetrics] = (
            cache if cache is not None else TTLCache(IMPACT_CACHE_TTL, name="impact")
        )

    async def get_impact_metrics(self, titles: list[str], days: int = 30) -> ImpactMetrics:
        """Views over ``days`` days for the given articles."""
        cache_key = f"titles:{days}:{'|'.join(titles)}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        metrics = await self.metrics_client.get_impact_metrics(titles, days)
        self.cache.set(cache_key, metrics)
        return metrics

    async def get_editor_impact(
        self, username: str, days: int = 30, limit: int = 100
    ) -> ImpactMetrics:
        """Views of the articles a user created in the main namespace."""
        cache_key = f"editor:{username}:{days}:{limit}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        created = await self.query_client.get_articles_created(username, limit=limit)
        titles = list(dict.fromkeys(c.title for c in created))
        logger.debug(f"Computing impact for {len(titles)} articles created by {username}")

        metrics = await self.metrics_client.get_impact_metrics(titles, days)
        self.cache.set(cache_key, metrics)
        return metrics
