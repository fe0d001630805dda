from dataclasses import dataclass
from datetime import datetime
from typing import Any

from wikidash.models.contribution import Contribution
from wikidash.models.stats import EditorStats
from wikidash.models.user import WikiUser


@dataclass(frozen=True)
class EditorDashboard:
    """Aggregate read model behind the dashboard.

    Built fresh on every refresh and replaced wholesale, never patched.
    Drafts, tasks, focus areas and COI disclosures are owned by the front
    end; this core always leaves them empty.
    """

    user: WikiUser
    stats: EditorStats
    recent_contributions: tuple[Contribution, ...]
    last_updated: datetime
    drafts: tuple[Any, ...] = ()
    tasks: tuple[Any, ...] = ()
    focus_areas: tuple[Any, ...] = ()
    coi_disclosures: tuple[Any, ...] = ()
