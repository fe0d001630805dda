"""Pure aggregations over contributions: daily activity, summaries, streaks."""

from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from wikidash.models.contribution import Contribution, ContributionType
from wikidash.models.stats import (
    ArticleEditCount,
    ContributionSummary,
    DailyActivity,
    EditStreak,
)

MOST_EDITED_LIMIT = 10


def build_daily_activity(
    contributions: Iterable[Contribution],
    days: int = 30,
    now: datetime | None = None,
) -> tuple[DailyActivity, ...]:
    """
    Bucket contributions by calendar day (UTC) inside a lookback window.

    Only days with at least one contribution are returned, oldest first.
    Negative byte diffs count as edits but add no bytes.
    """
    cutoff = (now or datetime.now(UTC)) - timedelta(days=days)

    edit_counts: dict[date, int] = defaultdict(int)
    bytes_added: dict[date, int] = defaultdict(int)
    for c in contributions:
        if c.timestamp < cutoff:
            continue
        day = c.timestamp.astimezone(UTC).date()
        edit_counts[day] += 1
        bytes_added[day] += max(0, c.byte_diff)

    return tuple(
        DailyActivity(date=day, edit_count=edit_counts[day], bytes_added=bytes_added[day])
        for day in sorted(edit_counts)
    )


def analyze_contributions(contributions: Iterable[Contribution]) -> ContributionSummary:
    """Totals by type plus the ten most edited articles."""
    by_type: Counter[ContributionType] = Counter()
    by_article: Counter[str] = Counter()
    total_edits = 0
    total_bytes_added = 0

    for c in contributions:
        total_edits += 1
        total_bytes_added += max(0, c.byte_diff)
        by_type[c.type] += 1
        by_article[c.article_title] += 1

    return ContributionSummary(
        total_edits=total_edits,
        total_bytes_added=total_bytes_added,
        major_expansions=by_type[ContributionType.MAJOR_EXPANSION],
        minor_edits=by_type[ContributionType.MINOR_EDIT],
        new_articles=by_type[ContributionType.NEW_ARTICLE],
        talk_page_posts=by_type[ContributionType.TALK_PAGE],
        reverts=by_type[ContributionType.REVERT],
        most_edited_articles=tuple(
            ArticleEditCount(title=title, edit_count=count)
            for title, count in by_article.most_common(MOST_EDITED_LIMIT)
        ),
    )


def compute_edit_streak(
    contributions: Iterable[Contribution],
    today: date | None = None,
) -> EditStreak:
    """
    Consecutive editing days.

    The current streak counts back from today; a streak that ended
    yesterday is still current (today is not over yet).
    """
    days = {c.timestamp.astimezone(UTC).date() for c in contributions}
    if not days:
        return EditStreak(current=0, longest=0, active_days=0)

    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(days):
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day

    today = today or datetime.now(UTC).date()
    cursor = today if today in days else today - timedelta(days=1)
    current = 0
    while cursor in days:
        current += 1
        cursor -= timedelta(days=1)

    return EditStreak(current=current, longest=longest, active_days=len(days))
