"""Constants for the Wikimedia transport clients."""

# MediaWiki action API entry point, relative to the /w/ base URL
QUERY_ENDPOINT = "/api.php"

# Sent with every query API request
QUERY_DEFAULT_PARAMS: dict[str, str | int] = {
    "format": "json",
    "formatversion": 2,  # Booleans as true/false, page lists as arrays
    "origin": "*",
}

# Property selectors per list module
USER_PROPS = "registration|editcount|groups"
USERCONTRIB_PROPS = "ids|title|timestamp|comment|size|sizediff|flags|tags"
RECENTCHANGE_PROPS = "title|timestamp|ids|sizes|comment|flags|user"
LOGEVENT_PROPS = "ids|title|type|user|timestamp|comment|details"

# Per-request ceiling the API accepts for non-bot accounts
MAX_QUERY_LIMIT = 500

# Namespaces
NS_MAIN = 0
NS_USER = 2
TALK_NAMESPACES: frozenset[int] = frozenset({1, 3, 5})  # Talk, User talk, Project talk

# Pageviews defaults
PAGEVIEWS_ACCESS = "all-access"
PAGEVIEWS_AGENT = "all-agents"
PAGEVIEWS_DATE_FORMAT = "%Y%m%d"

# Number of articles ranked in impact metrics
TOP_ARTICLES_LIMIT = 10
