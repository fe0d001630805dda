from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:5173"]

    # Identity the dashboard is shown for when no username is given
    configured_username: str = ""

    # Upstream APIs
    wikipedia_base_url: str = "https://en.wikipedia.org/w"  # api.php lives here
    xtools_api_url: str = "https://xtools.wmcloud.org/api"
    wikimedia_rest_api_url: str = "https://wikimedia.org/api/rest_v1"
    wiki_site: str = "en.wikipedia.org"  # XTools site segment
    wiki_article_base_url: str = "https://en.wikipedia.org/wiki/"
    pageviews_project: str = "en.wikipedia"
    # Wikimedia policy requires an identifying User-Agent
    user_agent: str = "WikiEditorDashboard/1.0 (https://github.com/wikidash/wikidash)"

    # Transport resilience (seconds)
    request_timeout: float = 30.0
    wikipedia_min_request_interval: float = 0.2
    xtools_min_request_interval: float = 0.2
    wikimedia_min_request_interval: float = 0.1
    max_retries: int = Field(3, ge=1)  # Total attempts per request, first one included
    initial_backoff: float = 1.0
    backoff_jitter: float = 1.0

    # Cache TTLs (seconds)
    user_cache_ttl: float = 300
    contributions_cache_ttl: float = 60
    stats_cache_ttl: float = 60
    dashboard_cache_ttl: float = 60
    impact_cache_ttl: float = 3600
    cache_maxsize: int = 512

    # Dashboard
    dashboard_refresh_interval: float = 300
    dashboard_max_recent_contributions: int = 50
    dashboard_activity_days: int = 30


settings = Settings()
