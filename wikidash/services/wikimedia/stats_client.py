"""
Statistics API client (XTools).

Path-parameterized JSON endpoints keyed by site and username:
- /user/simple_editcount/{site}/{user}
- /user/month_counts/{site}/{user}
- /user/top_edits/{site}/{user}/{ns}/{limit}
- /user/namespace_totals/{site}/{user}
"""

import logging
from typing import Any
from urllib.parse import quote

from wikidash.config.settings import Settings
from wikidash.core.exceptions import ClientError, EntityNotFound
from wikidash.services.wikimedia.base_client import (
    ApiResponse,
    BaseApiClient,
    CredentialSupplier,
)
from wikidash.services.wikimedia.constants import NS_MAIN
from wikidash.services.wikimedia.types import (
    EditCount,
    MonthCounts,
    NamespaceTotals,
    TopEdit,
)

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    """Encode a value as a single URL path segment."""
    return quote(value, safe="")


class XToolsStatsClient:
    """Read operations for the XTools statistics API."""

    def __init__(self, api: BaseApiClient, site: str = "en.wikipedia.org"):
        self.api = api
        self.site = site

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        credentials: CredentialSupplier | None = None,
        **client_kwargs: Any,
    ) -> "XToolsStatsClient":
        api = BaseApiClient(
            base_url=settings.xtools_api_url,
            timeout=settings.request_timeout,
            default_headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            min_request_interval=settings.xtools_min_request_interval,
            max_retries=settings.max_retries,
            initial_backoff=settings.initial_backoff,
            backoff_jitter=settings.backoff_jitter,
            credentials=credentials,
            **client_kwargs,
        )
        return cls(api, site=settings.wiki_site)

    async def aclose(self) -> None:
        await self.api.aclose()

    async def _get_user_endpoint(self, endpoint: str, username: str, *extra: str | int) -> ApiResponse:
        path = f"/user/{endpoint}/{_segment(self.site)}/{_segment(username)}"
        for part in extra:
            path += f"/{_segment(str(part))}"
        try:
            return await self.api.get(path)
        except ClientError as e:
            if e.status == 404:
                raise EntityNotFound("User", username) from e
            raise

    async def get_edit_count(self, username: str) -> EditCount:
        """Fetch live and deleted edit counters for a user."""
        response = await self._get_user_endpoint("simple_editcount", username)
        data: dict[str, Any] = response.data or {}

        return EditCount(
            username=data.get("username", username),
            user_id=data.get("user_id", 0),
            live_edit_count=data.get("live_edit_count", 0),
            deleted_edit_count=data.get("deleted_edit_count", 0),
            first_edit=data.get("first_edit"),
            latest_edit=data.get("latest_edit"),
        )

    async def get_month_counts(self, username: str) -> MonthCounts:
        """Fetch edits per month ("YYYY-MM" -> count)."""
        response = await self._get_user_endpoint("month_counts", username)
        data: dict[str, Any] = response.data or {}

        counts = {month: int(count) for month, count in data.get("month_counts", {}).items()}
        return MonthCounts(username=username, month_counts=counts)

    async def get_top_edits(
        self,
        username: str,
        namespace: int = NS_MAIN,
        limit: int = 10,
    ) -> list[TopEdit]:
        """
        Fetch the pages a user edited most in a namespace.

        Returns:
            TopEdit list, most edited first, at most ``limit`` entries
        """
        response = await self._get_user_endpoint("top_edits", username, namespace, limit)
        data: dict[str, Any] = response.data or {}

        raw = data.get("top_edits", [])
        # Keyed by namespace id when the API groups results
        if isinstance(raw, dict):
            raw = raw.get(str(namespace), [])

        edits = [
            TopEdit(
                page_title=item.get("page_title", ""),
                page_namespace=int(item.get("page_namespace", namespace)),
                count=int(item.get("count", 0)),
            )
            for item in raw
        ]
        edits.sort(key=lambda e: e.count, reverse=True)
        return edits[:limit]

    async def get_namespace_totals(self, username: str) -> NamespaceTotals:
        """Fetch edit totals per namespace."""
        response = await self._get_user_endpoint("namespace_totals", username)
        data: dict[str, Any] = response.data or {}

        totals = {int(ns): int(count) for ns, count in data.get("namespace_totals", {}).items()}
        return NamespaceTotals(username=username, totals=totals)
