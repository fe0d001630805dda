"""Unit tests for the pageview metrics client."""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from tests.helpers.fakes import make_api_client
from wikidash.core.exceptions import EntityNotFound
from wikidash.services.wikimedia.metrics_client import PageviewsClient, article_path_segment


def _items(*views: int) -> dict:
    return {
        "items": [
            {"article": "X", "timestamp": f"202603{day:02d}00", "views": v}
            for day, v in enumerate(views, start=1)
        ]
    }


class PageviewServer:
    """Serves pageviews per article title; unknown titles get 404."""

    def __init__(self, views: dict[str, tuple[int, ...]]) -> None:
        self.views = views
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        article = request.url.path.split("/")[-4]
        if article not in self.views:
            return httpx.Response(404, json={"type": "not_found"})
        return httpx.Response(200, json=_items(*self.views[article]))


def _client(server: PageviewServer) -> PageviewsClient:
    return PageviewsClient(
        make_api_client(server, base_url="https://wikimedia.org/api/rest_v1"),
        project="en.wikipedia",
    )


class TestGetPageViews:
    """Tests for a single article's daily views."""

    @pytest.mark.anyio
    async def test_totals_and_average(self):
        server = PageviewServer({"Alpha_Beta": (10, 20, 31)})

        views = await _client(server).get_page_views("Alpha Beta", days=30, end=date(2026, 3, 31))

        assert views.total_views == 61
        assert views.average_daily == 20
        assert [d.date for d in views.daily_views] == ["2026-03-01", "2026-03-02", "2026-03-03"]
        assert server.requests[0].url.path == (
            "/api/rest_v1/metrics/pageviews/per-article/en.wikipedia/all-access/all-agents/"
            "Alpha_Beta/daily/20260302/20260331"
        )

    @pytest.mark.anyio
    async def test_window_covers_exactly_days_calendar_days(self):
        server = PageviewServer({"Alpha": (1,)})

        await _client(server).get_page_views("Alpha", days=1, end=date(2026, 3, 31))

        assert server.requests[0].url.path.endswith("/Alpha/daily/20260331/20260331")

    @pytest.mark.anyio
    async def test_404_is_not_found_and_not_retried(self):
        server = PageviewServer({})

        with pytest.raises(EntityNotFound):
            await _client(server).get_page_views("Nothing")

        assert len(server.requests) == 1

    @pytest.mark.anyio
    async def test_empty_items_average_zero(self):
        server = PageviewServer({"Quiet": ()})

        views = await _client(server).get_page_views("Quiet")

        assert views.total_views == 0
        assert views.average_daily == 0

    def test_path_segment_encoding(self):
        assert article_path_segment("AC/DC live") == "AC%2FDC_live"


class TestImpactMetrics:
    """Tests for batch fetches and ranking."""

    @pytest.mark.anyio
    async def test_failed_titles_count_as_zero_and_keep_order(self):
        server = PageviewServer({"Alpha": (5, 5), "Gamma": (100,)})

        stats = await _client(server).get_multiple_page_views(["Alpha", "Missing", "Gamma"])

        assert [s.title for s in stats] == ["Alpha", "Missing", "Gamma"]
        assert [s.total_views for s in stats] == [10, 0, 100]

    @pytest.mark.anyio
    async def test_impact_ranks_top_articles(self):
        server = PageviewServer({f"A{i}": (i,) for i in range(12)})
        titles = [f"A{i}" for i in range(12)]

        impact = await _client(server).get_impact_metrics(titles)

        assert impact.total_views == sum(range(12))
        assert len(impact.article_stats) == 12
        assert len(impact.top_articles) == 10
        assert impact.top_articles[0].title == "A11"
        assert impact.top_articles[-1].title == "A2"

    @pytest.mark.anyio
    async def test_no_titles(self):
        impact = await _client(PageviewServer({})).get_impact_metrics([])

        assert impact.total_views == 0
        assert impact.top_articles == []
