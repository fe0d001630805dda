"""Dashboard configuration - knobs for the aggregate read model."""

from dataclasses import dataclass

from wikidash.config.settings import Settings


@dataclass(frozen=True)
class DashboardConfig:
    """Configuration for a dashboard repository.

    The username is not part of the config: it is passed to every
    repository call (see Settings.configured_username for the default).
    """

    refresh_interval: float  # Seconds between front-end auto-refreshes
    max_recent_contributions: int
    activity_days: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "DashboardConfig":
        return cls(
            refresh_interval=settings.dashboard_refresh_interval,
            max_recent_contributions=settings.dashboard_max_recent_contributions,
            activity_days=settings.dashboard_activity_days,
        )


DEFAULT_CONFIG = DashboardConfig(
    refresh_interval=300,  # 5 minutes
    max_recent_contributions=50,
    activity_days=30,
)
