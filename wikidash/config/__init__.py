"""Configuration package."""

from wikidash.config.dashboard import DEFAULT_CONFIG, DashboardConfig
from wikidash.config.settings import Settings, settings

__all__ = [
    "DashboardConfig",
    "DEFAULT_CONFIG",
    "Settings",
    "settings",
]
