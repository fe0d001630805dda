"""Data types for Wikimedia API responses."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class UserInfo:
    """Account metadata from ``list=users``."""

    user_id: int
    name: str
    registration: str | None  # ISO 8601, None for very old accounts
    edit_count: int
    groups: list[str]


@dataclass
class UserContrib:
    """Single revision from ``list=usercontribs``."""

    rev_id: int
    parent_id: int  # 0 when the revision created the page
    page_id: int
    ns: int
    title: str
    timestamp: str  # ISO 8601
    comment: str
    size: int
    size_diff: int
    minor: bool
    tags: list[str]
    user: str = ""


@dataclass
class ContribPage:
    """One page of contributions plus the continuation to fetch the next."""

    contribs: list[UserContrib]
    continuation: dict[str, str] | None  # Echo back verbatim; None on the last page


@dataclass
class RecentChange:
    """Entry from ``list=recentchanges``."""

    type: str  # "edit", "new", "log", ...
    ns: int
    title: str
    rev_id: int
    old_rev_id: int
    user: str
    timestamp: str
    comment: str
    old_len: int
    new_len: int
    minor: bool = False

    @property
    def size_diff(self) -> int:
        return self.new_len - self.old_len


@dataclass
class LogEvent:
    """Entry from ``list=logevents`` (thanks, page creations, ...)."""

    log_id: int
    type: str
    action: str
    user: str
    title: str
    timestamp: str
    comment: str = ""
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class PageInfo:
    """Page metadata from ``prop=info``."""

    title: str
    ns: int
    page_id: int | None  # None when the page is missing
    missing: bool = False
    length: int | None = None
    last_rev_id: int | None = None
    touched: str | None = None


@dataclass
class EditCount:
    """Edit counters from the statistics API."""

    username: str
    user_id: int
    live_edit_count: int
    deleted_edit_count: int
    first_edit: str | None
    latest_edit: str | None


@dataclass
class MonthCounts:
    """Edits per month, keyed "YYYY-MM"."""

    username: str
    month_counts: dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.month_counts.values())


@dataclass
class TopEdit:
    """A page ranked by how often the user edited it."""

    page_title: str
    page_namespace: int
    count: int


@dataclass
class NamespaceTotals:
    """Edit totals per namespace id."""

    username: str
    totals: dict[int, int]


@dataclass
class DailyViews:
    """Views for one calendar day."""

    date: str  # YYYY-MM-DD
    views: int


@dataclass
class PageViews:
    """Pageview aggregate for one article over a window."""

    title: str
    total_views: int
    daily_views: list[DailyViews]
    average_daily: int


@dataclass
class ImpactMetrics:
    """Pageview totals across a set of articles."""

    total_views: int
    article_stats: list[PageViews]
    top_articles: list[PageViews]  # Highest total_views first
