from wikidash.api.v1 import dashboard, impact, users

__all__ = [
    "dashboard",
    "users",
    "impact",
]
