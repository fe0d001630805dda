"""
Wikimedia transport package.

Re-exports the transport clients and their response types.
Usage: `from wikidash.services.wikimedia import WikipediaQueryClient, UserInfo`

Module structure:
- base_client.py: BaseApiClient (rate limiting + retry over httpx)
- query_client.py: MediaWiki query API
- stats_client.py: XTools statistics API
- metrics_client.py: Wikimedia pageview metrics API
- types.py: Data types and response models
- constants.py: Endpoints, prop selectors, namespaces
"""

from wikidash.services.wikimedia.base_client import (
    ApiResponse,
    BaseApiClient,
    CredentialSupplier,
    clean_params,
)
from wikidash.services.wikimedia.metrics_client import PageviewsClient
from wikidash.services.wikimedia.query_client import WikipediaQueryClient
from wikidash.services.wikimedia.stats_client import XToolsStatsClient
from wikidash.services.wikimedia.types import (
    ContribPage,
    DailyViews,
    EditCount,
    ImpactMetrics,
    LogEvent,
    MonthCounts,
    NamespaceTotals,
    PageInfo,
    PageViews,
    RecentChange,
    TopEdit,
    UserContrib,
    UserInfo,
)

__all__ = [
    # Clients
    "BaseApiClient",
    "WikipediaQueryClient",
    "XToolsStatsClient",
    "PageviewsClient",
    # Transport helpers
    "ApiResponse",
    "CredentialSupplier",
    "clean_params",
    # Types
    "ContribPage",
    "DailyViews",
    "EditCount",
    "ImpactMetrics",
    "LogEvent",
    "MonthCounts",
    "NamespaceTotals",
    "PageInfo",
    "PageViews",
    "RecentChange",
    "TopEdit",
    "UserContrib",
    "UserInfo",
]
