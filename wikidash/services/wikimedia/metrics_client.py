"""
Pageview metrics client (Wikimedia REST API).

Per-article daily pageviews:
/metrics/pageviews/per-article/{project}/{access}/{agent}/{article}/daily/{start}/{end}

A 404 means the article has no recorded traffic. It is a ClientError, so
the retry executor never retries it, and it is surfaced as EntityNotFound.
"""

import asyncio
import logging
from datetime import UTC, date, datetime, timedelta
from typing import Any
from urllib.parse import quote

from wikidash.config.settings import Settings
from wikidash.core.exceptions import ApiError, ClientError, EntityNotFound
from wikidash.services.wikimedia.base_client import BaseApiClient, CredentialSupplier
from wikidash.services.wikimedia.constants import (
    PAGEVIEWS_ACCESS,
    PAGEVIEWS_AGENT,
    PAGEVIEWS_DATE_FORMAT,
    TOP_ARTICLES_LIMIT,
)
from wikidash.services.wikimedia.types import DailyViews, ImpactMetrics, PageViews

logger = logging.getLogger(__name__)


def article_path_segment(title: str) -> str:
    """Encode an article title the way the REST API expects (underscores)."""
    return quote(title.replace(" ", "_"), safe="")


def _views_date(timestamp: str) -> str:
    """Convert a "YYYYMMDDHH" pageview timestamp to "YYYY-MM-DD"."""
    return f"{timestamp[0:4]}-{timestamp[4:6]}-{timestamp[6:8]}"


class PageviewsClient:
    """Read operations for the pageview metrics API."""

    def __init__(self, api: BaseApiClient, project: str = "en.wikipedia"):
        self.api = api
        self.project = project

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        credentials: CredentialSupplier | None = None,
        **client_kwargs: Any,
    ) -> "PageviewsClient":
        api = BaseApiClient(
            base_url=settings.wikimedia_rest_api_url,
            timeout=settings.request_timeout,
            default_headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            min_request_interval=settings.wikimedia_min_request_interval,
            max_retries=settings.max_retries,
            initial_backoff=settings.initial_backoff,
            backoff_jitter=settings.backoff_jitter,
            credentials=credentials,
            **client_kwargs,
        )
        return cls(api, project=settings.pageviews_project)

    async def aclose(self) -> None:
        await self.api.aclose()

    async def get_page_views(
        self,
        title: str,
        days: int = 30,
        project: str | None = None,
        access: str = PAGEVIEWS_ACCESS,
        agent: str = PAGEVIEWS_AGENT,
        end: date | None = None,
    ) -> PageViews:
        """
        Fetch daily views for one article.

        Args:
            title: Article title (spaces are converted to underscores)
            days: Window length, ending at ``end``
            project: Project domain prefix, defaults to the configured one
            access: Access method filter
            agent: Agent type filter
            end: Last day of the window (defaults to today, UTC)

        Raises:
            EntityNotFound: The article has no recorded traffic (HTTP 404)
        """
        end_date = end or datetime.now(UTC).date()
        start_date = end_date - timedelta(days=days - 1)  # Both ends are inclusive

        path = (
            f"/metrics/pageviews/per-article/{project or self.project}/{access}/{agent}/"
            f"{article_path_segment(title)}/daily/"
            f"{start_date.strftime(PAGEVIEWS_DATE_FORMAT)}/{end_date.strftime(PAGEVIEWS_DATE_FORMAT)}"
        )

        try:
            response = await self.api.get(path)
        except ClientError as e:
            if e.status == 404:
                raise EntityNotFound("Pageviews", title) from e
            raise

        items: list[dict[str, Any]] = (response.data or {}).get("items", [])
        daily_views = [
            DailyViews(date=_views_date(item["timestamp"]), views=int(item.get("views", 0)))
            for item in items
        ]
        total_views = sum(d.views for d in daily_views)
        average_daily = round(total_views / len(daily_views)) if daily_views else 0

        return PageViews(
            title=title,
            total_views=total_views,
            daily_views=daily_views,
            average_daily=average_daily,
        )

    async def _page_views_or_empty(self, title: str, days: int) -> PageViews:
        try:
            return await self.get_page_views(title, days)
        except ApiError as e:
            logger.warning(f"Failed to get views for {title}: {e}")
            return PageViews(title=title, total_views=0, daily_views=[], average_daily=0)

    async def get_multiple_page_views(self, titles: list[str], days: int = 30) -> list[PageViews]:
        """
        Fetch views for several articles.

        Articles that fail (no traffic, upstream errors) are reported with
        zero views instead of failing the batch. Order follows ``titles``.
        """
        return list(
            await asyncio.gather(*(self._page_views_or_empty(title, days) for title in titles))
        )

    async def get_impact_metrics(self, titles: list[str], days: int = 30) -> ImpactMetrics:
        """Total views across articles plus the most viewed ones."""
        article_stats = await self.get_multiple_page_views(titles, days)
        total_views = sum(a.total_views for a in article_stats)
        top_articles = sorted(article_stats, key=lambda a: a.total_views, reverse=True)[
            :TOP_ARTICLES_LIMIT
        ]

        return ImpactMetrics(
            total_views=total_views,
            article_stats=article_stats,
            top_articles=top_articles,
        )
