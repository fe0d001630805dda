from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WikiUser:
    """A wiki account as shown on the dashboard."""

    username: str
    user_id: int
    registration_date: datetime | None
    edit_count: int
    groups: tuple[str, ...]
