from wikidash.domain.contribution_repository import ContributionRepository
from wikidash.domain.dashboard_repository import DashboardRepository
from wikidash.domain.impact_repository import ImpactRepository
from wikidash.domain.registry import RepositoryRegistry, build_registry
from wikidash.domain.stats_repository import StatsRepository
from wikidash.domain.user_repository import UserRepository

__all__ = [
    "ContributionRepository",
    "DashboardRepository",
    "ImpactRepository",
    "RepositoryRegistry",
    "StatsRepository",
    "UserRepository",
    "build_registry",
]
