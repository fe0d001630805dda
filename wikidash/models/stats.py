from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyActivity:
    """Edits on one calendar day (UTC)."""

    date: date
    edit_count: int
    bytes_added: int  # Sum of non-negative byte diffs only


@dataclass(frozen=True)
class EditorStats:
    """Counters for the stats panel."""

    total_edits: int
    articles_created: int
    major_expansions: int
    minor_edits: int
    talk_page_posts: int
    recent_activity: tuple[DailyActivity, ...] = ()


@dataclass(frozen=True)
class ArticleEditCount:
    title: str
    edit_count: int


@dataclass(frozen=True)
class ContributionSummary:
    """Totals over a list of contributions."""

    total_edits: int
    total_bytes_added: int
    major_expansions: int
    minor_edits: int
    new_articles: int
    talk_page_posts: int
    reverts: int
    most_edited_articles: tuple[ArticleEditCount, ...] = ()


@dataclass(frozen=True)
class EditStreak:
    """Consecutive-day editing streaks."""

    current: int  # Days in the streak ending today or yesterday
    longest: int
    active_days: int
