"""Unit tests for the MediaWiki query API client.

Tests WikipediaQueryClient over httpx.MockTransport to verify:
- Query parameter construction (list modules, props, limits)
- Response parsing (formatversion=2 payloads)
- Missing / invalid users and API error envelopes
- Continuation handling across pages
"""

from __future__ import annotations

import httpx
import pytest

from tests.helpers.fakes import make_api_client
from wikidash.core.exceptions import ClientError, EntityNotFound
from wikidash.services.wikimedia.constants import QUERY_DEFAULT_PARAMS
from wikidash.services.wikimedia.query_client import WikipediaQueryClient

BASE_URL = "https://en.wikipedia.org/w"


def _contrib_json(revid: int = 100, title: str = "Alpha", **overrides: object) -> dict:
    """Minimal usercontribs item."""
    base = {
        "userid": 42,
        "user": "Example",
        "pageid": 7,
        "revid": revid,
        "parentid": revid - 1,
        "ns": 0,
        "title": title,
        "timestamp": "2026-03-10T12:00:00Z",
        "comment": "copyedit",
        "size": 2048,
        "sizediff": 12,
        "minor": False,
        "tags": [],
    }
    base.update(overrides)
    return base


class QueryServer:
    """MockTransport handler returning one payload per request, in order."""

    def __init__(self, *payloads: dict) -> None:
        self.payloads = list(payloads)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, json=self.payloads.pop(0))

    def params(self, index: int = 0) -> httpx.QueryParams:
        return self.requests[index].url.params


def _client(server: QueryServer) -> WikipediaQueryClient:
    return WikipediaQueryClient(
        make_api_client(server, base_url=BASE_URL, default_params=QUERY_DEFAULT_PARAMS)
    )


# ═══════════════════════════════════════════════════════════════════════════
# get_user_info
# ═══════════════════════════════════════════════════════════════════════════


class TestGetUserInfo:
    """Tests for list=users lookups."""

    @pytest.mark.anyio
    async def test_parses_user(self):
        server = QueryServer(
            {
                "batchcomplete": True,
                "query": {
                    "users": [
                        {
                            "userid": 42,
                            "name": "Example",
                            "registration": "2019-05-01T10:00:00Z",
                            "editcount": 1234,
                            "groups": ["*", "user", "autoconfirmed"],
                        }
                    ]
                },
            }
        )

        info = await _client(server).get_user_info("Example")

        assert info.user_id == 42
        assert info.name == "Example"
        assert info.edit_count == 1234
        assert info.registration == "2019-05-01T10:00:00Z"
        assert "autoconfirmed" in info.groups

        params = server.params()
        assert server.requests[0].url.path == "/w/api.php"
        assert params["action"] == "query"
        assert params["list"] == "users"
        assert params["ususers"] == "Example"
        assert params["format"] == "json"
        assert params["formatversion"] == "2"

    @pytest.mark.anyio
    async def test_missing_user_raises_not_found(self):
        server = QueryServer({"query": {"users": [{"name": "Nobody", "missing": True}]}})

        with pytest.raises(EntityNotFound, match="User not found: Nobody"):
            await _client(server).get_user_info("Nobody")

    @pytest.mark.anyio
    async def test_invalid_username_raises_not_found(self):
        server = QueryServer({"query": {"users": [{"name": "<bad>", "invalid": True}]}})

        with pytest.raises(EntityNotFound):
            await _client(server).get_user_info("<bad>")

    @pytest.mark.anyio
    async def test_missing_is_not_retried(self):
        server = QueryServer({"query": {"users": [{"name": "Nobody", "missing": True}]}})

        with pytest.raises(EntityNotFound):
            await _client(server).get_user_info("Nobody")

        assert len(server.requests) == 1

    @pytest.mark.anyio
    async def test_error_envelope_raises_client_error(self):
        server = QueryServer(
            {"error": {"code": "badvalue", "info": "Unrecognized value for parameter"}}
        )

        with pytest.raises(ClientError, match="Unrecognized value") as exc_info:
            await _client(server).get_user_info("Example")

        assert exc_info.value.code == "badvalue"


# ═══════════════════════════════════════════════════════════════════════════
# Contributions
# ═══════════════════════════════════════════════════════════════════════════


class TestGetUserContribs:
    """Tests for list=usercontribs and continuation."""

    @pytest.mark.anyio
    async def test_single_page(self):
        server = QueryServer(
            {
                "query": {
                    "usercontribs": [
                        _contrib_json(101, "Alpha", minor=True, tags=["mw-undo"]),
                        _contrib_json(100, "Beta", parentid=0, sizediff=4096),
                    ]
                }
            }
        )

        page = await _client(server).get_user_contribs("Example", limit=20)

        assert page.continuation is None
        assert [c.rev_id for c in page.contribs] == [101, 100]
        assert page.contribs[0].minor is True
        assert page.contribs[0].tags == ["mw-undo"]
        assert page.contribs[1].parent_id == 0
        assert page.contribs[1].size_diff == 4096

        params = server.params()
        assert params["list"] == "usercontribs"
        assert params["ucuser"] == "Example"
        assert params["uclimit"] == "20"
        assert "ucnamespace" not in params

    @pytest.mark.anyio
    async def test_limit_is_capped(self):
        server = QueryServer({"query": {"usercontribs": []}})

        await _client(server).get_user_contribs("Example", limit=5000)

        assert server.params()["uclimit"] == "500"

    @pytest.mark.anyio
    async def test_returns_and_echoes_continuation(self):
        server = QueryServer(
            {
                "continue": {"uccontinue": "20260301000000|99", "continue": "-||"},
                "query": {"usercontribs": [_contrib_json(100)]},
            },
            {"query": {"usercontribs": [_contrib_json(99)]}},
        )
        client = _client(server)

        first = await client.get_user_contribs("Example", limit=1)
        second = await client.get_user_contribs(
            "Example", limit=1, continuation=first.continuation
        )

        assert first.continuation == {"uccontinue": "20260301000000|99", "continue": "-||"}
        assert server.params(1)["uccontinue"] == "20260301000000|99"
        assert server.params(1)["continue"] == "-||"
        assert second.continuation is None

    @pytest.mark.anyio
    async def test_get_all_follows_continuation_until_limit(self):
        server = QueryServer(
            {
                "continue": {"uccontinue": "a", "continue": "-||"},
                "query": {"usercontribs": [_contrib_json(i) for i in (110, 109)]},
            },
            {
                "continue": {"uccontinue": "b", "continue": "-||"},
                "query": {"usercontribs": [_contrib_json(i) for i in (108, 107)]},
            },
        )

        contribs = await _client(server).get_all_user_contribs("Example", limit=3)

        assert [c.rev_id for c in contribs] == [110, 109, 108]
        assert len(server.requests) == 2
        # Second page only asks for what is still missing
        assert server.params(1)["uclimit"] == "1"

    @pytest.mark.anyio
    async def test_get_all_stops_without_continuation(self):
        server = QueryServer({"query": {"usercontribs": [_contrib_json(100)]}})

        contribs = await _client(server).get_all_user_contribs("Example", limit=500)

        assert len(contribs) == 1
        assert len(server.requests) == 1

    @pytest.mark.anyio
    async def test_articles_created_filters_new_pages(self):
        server = QueryServer({"query": {"usercontribs": [_contrib_json(100, parentid=0)]}})

        await _client(server).get_articles_created("Example")

        params = server.params()
        assert params["ucshow"] == "new"
        assert params["ucnamespace"] == "0"


# ═══════════════════════════════════════════════════════════════════════════
# Feeds, logs and pages
# ═══════════════════════════════════════════════════════════════════════════


class TestOtherQueries:
    """Tests for recent changes, log events, subpages and page info."""

    @pytest.mark.anyio
    async def test_recent_changes(self):
        server = QueryServer(
            {
                "query": {
                    "recentchanges": [
                        {
                            "type": "edit",
                            "ns": 0,
                            "title": "Alpha",
                            "revid": 5,
                            "old_revid": 4,
                            "user": "Example",
                            "timestamp": "2026-03-10T12:00:00Z",
                            "oldlen": 100,
                            "newlen": 150,
                            "minor": True,
                        }
                    ]
                }
            }
        )

        changes = await _client(server).get_recent_changes("Example", days=7)

        assert changes[0].size_diff == 50
        assert changes[0].minor is True
        params = server.params()
        assert params["list"] == "recentchanges"
        assert params["rcuser"] == "Example"
        assert params["rcend"].endswith("Z")

    @pytest.mark.anyio
    async def test_thanks_received_targets_user_page(self):
        server = QueryServer(
            {
                "query": {
                    "logevents": [
                        {
                            "logid": 9,
                            "type": "thanks",
                            "action": "thank",
                            "user": "Fan",
                            "title": "User:Example",
                            "timestamp": "2026-03-10T12:00:00Z",
                        }
                    ]
                }
            }
        )

        events = await _client(server).get_thanks_received("Example")

        assert events[0].user == "Fan"
        params = server.params()
        assert params["letype"] == "thanks"
        assert params["letitle"] == "User:Example"
        assert "leuser" not in params

    @pytest.mark.anyio
    async def test_thanks_given_filters_by_performer(self):
        server = QueryServer({"query": {"logevents": []}})

        await _client(server).get_thanks_given("Example")

        assert server.params()["leuser"] == "Example"

    @pytest.mark.anyio
    async def test_user_subpages(self):
        server = QueryServer(
            {"query": {"allpages": [{"ns": 2, "title": "User:Example/Draft"}]}}
        )

        pages = await _client(server).get_user_subpages("Example")

        assert pages == ["User:Example/Draft"]
        assert server.params()["apprefix"] == "Example/"
        assert server.params()["apnamespace"] == "2"

    @pytest.mark.anyio
    async def test_page_info_flags_missing_pages(self):
        server = QueryServer(
            {
                "query": {
                    "pages": [
                        {"pageid": 1, "ns": 0, "title": "Alpha", "length": 500, "lastrevid": 9},
                        {"ns": 0, "title": "Ghost", "missing": True},
                    ]
                }
            }
        )

        pages = await _client(server).get_page_info(["Alpha", "Ghost"])

        assert pages["Alpha"].page_id == 1
        assert pages["Alpha"].length == 500
        assert pages["Ghost"].missing is True
        assert pages["Ghost"].page_id is None
        assert server.params()["titles"] == "Alpha|Ghost"

    @pytest.mark.anyio
    async def test_page_info_with_no_titles_skips_request(self):
        server = QueryServer()

        assert await _client(server).get_page_info([]) == {}
        assert server.requests == []
