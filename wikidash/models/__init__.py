from wikidash.models.contribution import Contribution, ContributionType
from wikidash.models.dashboard import EditorDashboard
from wikidash.models.stats import (
    ArticleEditCount,
    ContributionSummary,
    DailyActivity,
    EditorStats,
    EditStreak,
)
from wikidash.models.user import WikiUser

__all__ = [
    "ArticleEditCount",
    "Contribution",
    "ContributionSummary",
    "ContributionType",
    "DailyActivity",
    "EditorDashboard",
    "EditorStats",
    "EditStreak",
    "WikiUser",
]
