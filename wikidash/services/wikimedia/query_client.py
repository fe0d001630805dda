"""
MediaWiki query API client.

Provides read-only operations against ``action=query``:
- User metadata (list=users)
- User contributions with continuation (list=usercontribs)
- Recent changes (list=recentchanges)
- Log events, including thanks (list=logevents)
- User subpages (list=allpages)
- Page metadata (prop=info)

The API signals a missing entity inside a successful response, so
"not found" is detected here, after the transport layer returned, and is
never retried.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from wikidash.config.settings import Settings
from wikidash.core.exceptions import ClientError, EntityNotFound
from wikidash.services.wikimedia.base_client import (
    BaseApiClient,
    CredentialSupplier,
    Params,
)
from wikidash.services.wikimedia.constants import (
    LOGEVENT_PROPS,
    MAX_QUERY_LIMIT,
    NS_USER,
    QUERY_DEFAULT_PARAMS,
    QUERY_ENDPOINT,
    RECENTCHANGE_PROPS,
    USER_PROPS,
    USERCONTRIB_PROPS,
)
from wikidash.services.wikimedia.types import (
    ContribPage,
    LogEvent,
    PageInfo,
    RecentChange,
    UserContrib,
    UserInfo,
)

logger = logging.getLogger(__name__)


class WikipediaQueryClient:
    """
    Read operations for the MediaWiki query API.

    Owns its BaseApiClient: requests through this client are rate limited
    and retried independently of the statistics and metrics clients.
    """

    def __init__(self, api: BaseApiClient):
        self.api = api

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        credentials: CredentialSupplier | None = None,
        **client_kwargs: Any,
    ) -> "WikipediaQueryClient":
        """Build the client and its transport from application settings."""
        api = BaseApiClient(
            base_url=settings.wikipedia_base_url,
            timeout=settings.request_timeout,
            default_headers={"User-Agent": settings.user_agent},
            default_params=QUERY_DEFAULT_PARAMS,
            min_request_interval=settings.wikipedia_min_request_interval,
            max_retries=settings.max_retries,
            initial_backoff=settings.initial_backoff,
            backoff_jitter=settings.backoff_jitter,
            credentials=credentials,
            **client_kwargs,
        )
        return cls(api)

    async def aclose(self) -> None:
        await self.api.aclose()

    async def _query(self, params: Params) -> dict[str, Any]:
        """Run an ``action=query`` request and return the decoded envelope.

        MediaWiki reports request errors as HTTP 200 with an ``error`` object;
        those are raised as ClientError.
        """
        response = await self.api.get(QUERY_ENDPOINT, params={"action": "query", **params})
        data = response.data if isinstance(response.data, dict) else {}

        error = data.get("error")
        if error:
            raise ClientError(
                error.get("info", "MediaWiki API error"),
                status=response.status,
                code=error.get("code"),
            )
        return data

    async def get_user_info(self, username: str) -> UserInfo:
        """
        Fetch account metadata for a user.

        Raises:
            EntityNotFound: If the account does not exist or the name is invalid
        """
        data = await self._query(
            {
                "list": "users",
                "ususers": username,
                "usprop": USER_PROPS,
            }
        )

        users = data.get("query", {}).get("users", [])
        user = users[0] if users else None
        if not user or user.get("missing") or user.get("invalid"):
            raise EntityNotFound("User", username)

        return UserInfo(
            user_id=user["userid"],
            name=user["name"],
            registration=user.get("registration"),
            edit_count=user.get("editcount", 0),
            groups=list(user.get("groups", [])),
        )

    def _normalize_contrib(self, data: dict[str, Any]) -> UserContrib:
        """Convert a usercontribs item to a UserContrib dataclass."""
        return UserContrib(
            rev_id=data["revid"],
            parent_id=data.get("parentid", 0),
            page_id=data.get("pageid", 0),
            ns=data.get("ns", 0),
            title=data["title"],
            timestamp=data["timestamp"],
            comment=data.get("comment", ""),
            size=data.get("size", 0),
            size_diff=data.get("sizediff", 0),
            minor=bool(data.get("minor", False)),
            tags=list(data.get("tags", [])),
            user=data.get("user", ""),
        )

    async def get_user_contribs(
        self,
        username: str,
        limit: int = 50,
        continuation: Mapping[str, str] | None = None,
        namespace: int | None = None,
        show: str | None = None,
    ) -> ContribPage:
        """
        Fetch one page of a user's contributions, newest first.

        Args:
            username: Account name
            limit: Page size (capped at 500)
            continuation: The ``continuation`` of the previous page, if any
            namespace: Restrict to a namespace id
            show: ``ucshow`` filter (e.g. "new", "!minor")

        Returns:
            ContribPage with contributions and the continuation for the next page
        """
        params: dict[str, str | int | None] = {
            "list": "usercontribs",
            "ucuser": username,
            "uclimit": min(limit, MAX_QUERY_LIMIT),
            "ucprop": USERCONTRIB_PROPS,
            "ucnamespace": namespace,
            "ucshow": show,
        }
        if continuation:
            params.update(continuation)

        data = await self._query(params)

        contribs = [
            self._normalize_contrib(c) for c in data.get("query", {}).get("usercontribs", [])
        ]
        next_continuation = data.get("continue")
        return ContribPage(
            contribs=contribs,
            continuation=dict(next_continuation) if next_continuation else None,
        )

    async def get_all_user_contribs(
        self,
        username: str,
        limit: int = 500,
        namespace: int | None = None,
        show: str | None = None,
    ) -> list[UserContrib]:
        """
        Fetch up to ``limit`` contributions, following continuation tokens.

        Stops when enough records were gathered or the API has no more pages.
        """
        contribs: list[UserContrib] = []
        continuation: dict[str, str] | None = None

        while len(contribs) < limit:
            page = await self.get_user_contribs(
                username,
                limit=limit - len(contribs),
                continuation=continuation,
                namespace=namespace,
                show=show,
            )
            contribs.extend(page.contribs)

            if not page.continuation or not page.contribs:
                break
            continuation = page.continuation
            logger.debug(f"Following usercontribs continuation for {username}: {continuation}")

        return contribs[:limit]

    async def get_articles_created(
        self,
        username: str,
        namespace: int = 0,
        limit: int = 100,
    ) -> list[UserContrib]:
        """Fetch the page-creating revisions of a user in one namespace."""
        return await self.get_all_user_contribs(
            username, limit=limit, namespace=namespace, show="new"
        )

    async def get_recent_changes(
        self,
        username: str,
        days: int = 7,
        limit: int = 100,
    ) -> list[RecentChange]:
        """
        Fetch a user's edits from the recent-changes feed.

        Args:
            username: Account name
            days: How far back to look (the feed only keeps ~30 days)
            limit: Maximum number of entries (capped at 500)
        """
        rc_end = datetime.now(UTC) - timedelta(days=days)
        data = await self._query(
            {
                "list": "recentchanges",
                "rcuser": username,
                "rcend": rc_end.strftime("%Y-%m-%dT%H:%M:%SZ"),
                "rcprop": RECENTCHANGE_PROPS,
                "rctype": "edit|new",
                "rclimit": min(limit, MAX_QUERY_LIMIT),
            }
        )

        return [
            RecentChange(
                type=rc.get("type", "edit"),
                ns=rc.get("ns", 0),
                title=rc["title"],
                rev_id=rc.get("revid", 0),
                old_rev_id=rc.get("old_revid", 0),
                user=rc.get("user", username),
                timestamp=rc["timestamp"],
                comment=rc.get("comment", ""),
                old_len=rc.get("oldlen", 0),
                new_len=rc.get("newlen", 0),
                minor=bool(rc.get("minor", False)),
            )
            for rc in data.get("query", {}).get("recentchanges", [])
        ]

    async def get_log_events(
        self,
        log_type: str,
        *,
        user: str | None = None,
        title: str | None = None,
        limit: int = 50,
    ) -> list[LogEvent]:
        """
        Fetch entries of one log type, filtered by performer and/or target.

        Args:
            log_type: ``letype`` (e.g. "thanks", "create")
            user: Only events performed by this user
            title: Only events targeting this page
            limit: Maximum number of entries (capped at 500)
        """
        data = await self._query(
            {
                "list": "logevents",
                "letype": log_type,
                "leuser": user,
                "letitle": title,
                "leprop": LOGEVENT_PROPS,
                "lelimit": min(limit, MAX_QUERY_LIMIT),
            }
        )

        return [
            LogEvent(
                log_id=event.get("logid", 0),
                type=event.get("type", log_type),
                action=event.get("action", ""),
                user=event.get("user", ""),
                title=event.get("title", ""),
                timestamp=event.get("timestamp", ""),
                comment=event.get("comment", ""),
                params=dict(event.get("params", {})),
            )
            for event in data.get("query", {}).get("logevents", [])
        ]

    async def get_thanks_given(self, username: str, limit: int = 50) -> list[LogEvent]:
        """Thanks sent by a user."""
        return await self.get_log_events("thanks", user=username, limit=limit)

    async def get_thanks_received(self, username: str, limit: int = 50) -> list[LogEvent]:
        """Thanks sent to a user (logged against their user page)."""
        return await self.get_log_events("thanks", title=f"User:{username}", limit=limit)

    async def get_user_subpages(self, username: str, limit: int = 100) -> list[str]:
        """List titles of pages under ``User:<username>/``."""
        data = await self._query(
            {
                "list": "allpages",
                "apprefix": f"{username}/",
                "apnamespace": NS_USER,
                "aplimit": min(limit, MAX_QUERY_LIMIT),
            }
        )
        return [page["title"] for page in data.get("query", {}).get("allpages", [])]

    async def get_page_info(self, titles: list[str]) -> dict[str, PageInfo]:
        """
        Fetch page metadata for a batch of titles.

        Returns:
            Mapping of title to PageInfo; missing pages are flagged, not dropped
        """
        if not titles:
            return {}

        data = await self._query({"titles": "|".join(titles), "prop": "info"})

        pages: dict[str, PageInfo] = {}
        for page in data.get("query", {}).get("pages", []):
            missing = bool(page.get("missing", False))
            pages[page["title"]] = PageInfo(
                title=page["title"],
                ns=page.get("ns", 0),
                page_id=None if missing else page.get("pageid"),
                missing=missing,
                length=page.get("length"),
                last_rev_id=page.get("lastrevid"),
                touched=page.get("touched"),
            )
        return pages
