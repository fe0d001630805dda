import logging
from datetime import date, datetime

from wikidash.core.cache import TTLCache
from wikidash.domain.analysis import analyze_contributions, compute_edit_streak
from wikidash.domain.classification import to_contribution
from wikidash.models.contribution import Contribution
from wikidash.models.stats import ContributionSummary, EditStreak
from wikidash.services.wikimedia.query_client import WikipediaQueryClient

logger = logging.getLogger(__name__)

CONTRIBUTIONS_CACHE_TTL = 60  # 1 min

# Window used for history lookups that filter client-side
HISTORY_LIMIT = 500


class ContributionRepository:
    """A user's contributions as classified Contribution entities.

    Cached per (username, limit): a 50-item and a 500-item fetch are
    separate entries.
    """

    def __init__(
        self,
        client: WikipediaQueryClient,
        article_base_url: str = "https://en.wikipedia.org/wiki/",
        cache: TTLCache[tuple[Contribution, ...]] | None = None,
    ):
        self.client = client
        self.article_base_url = article_base_url
        self.cache: TTLCache[tuple[Contribution, ...]] = (
            cache if cache is not None else TTLCache(CONTRIBUTIONS_CACHE_TTL, name="contributions")
        )

    async def get_recent_contributions(
        self, username: str, limit: int = 50
    ) -> tuple[Contribution, ...]:
        """Newest-first contributions, following continuation past one page."""
        cache_key = f"{username}:{limit}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        contribs = await self.client.get_all_user_contribs(username, limit=limit)
        contributions = tuple(to_contribution(c, self.article_base_url) for c in contribs)

        self.cache.set(cache_key, contributions)
        return contributions

    async def get_contributions_by_date_range(
        self,
        username: str,
        start: datetime,
        end: datetime,
    ) -> tuple[Contribution, ...]:
        """Contributions with start <= timestamp <= end (timezone-aware bounds)."""
        # TODO: pass ucstart/ucend to the API instead of filtering the last 500 edits
        history = await self.get_recent_contributions(username, HISTORY_LIMIT)
        return tuple(c for c in history if start <= c.timestamp <= end)

    async def get_contributions_for_article(
        self, username: str, article_title: str
    ) -> tuple[Contribution, ...]:
        history = await self.get_recent_contributions(username, HISTORY_LIMIT)
        return tuple(c for c in history if c.article_title == article_title)

    async def get_contribution_summary(
        self, username: str, limit: int = HISTORY_LIMIT
    ) -> ContributionSummary:
        contributions = await self.get_recent_contributions(username, limit)
        return analyze_contributions(contributions)

    async def get_edit_streak(
        self,
        username: str,
        limit: int = HISTORY_LIMIT,
        today: date | None = None,
    ) -> EditStreak:
        contributions = await self.get_recent_contributions(username, limit)
        return compute_edit_streak(contributions, today=today)
