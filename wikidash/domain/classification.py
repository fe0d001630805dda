"""Contribution classification and raw-record mapping."""

from collections.abc import Iterable
from datetime import datetime
from urllib.parse import quote

from wikidash.models.contribution import Contribution, ContributionType
from wikidash.services.wikimedia.constants import TALK_NAMESPACES
from wikidash.services.wikimedia.types import UserContrib

MAJOR_EXPANSION_BYTES = 1000
REVERT_TAG_MARKERS = ("revert", "undo")


def classify_contribution(
    ns: int,
    tags: Iterable[str],
    parent_id: int,
    size_diff: int,
) -> ContributionType:
    """
    Classify a revision from its raw fields.

    Checks run in priority order and the first match wins, so a reverted
    page creation is a revert and any talk page edit is a talk page post:
    talk namespace, revert/undo tag, page creation, >1000 bytes changed,
    everything else.
    """
    if ns in TALK_NAMESPACES:
        return ContributionType.TALK_PAGE

    if any(marker in tag for tag in tags for marker in REVERT_TAG_MARKERS):
        return ContributionType.REVERT

    if parent_id == 0:
        return ContributionType.NEW_ARTICLE

    if abs(size_diff) > MAJOR_EXPANSION_BYTES:
        return ContributionType.MAJOR_EXPANSION

    return ContributionType.MINOR_EDIT


def article_url(title: str, base_url: str = "https://en.wikipedia.org/wiki/") -> str:
    """Build the canonical article URL for a title."""
    return f"{base_url}{quote(title.replace(' ', '_'), safe='')}"


def parse_timestamp(value: str) -> datetime:
    """Parse a MediaWiki ISO 8601 timestamp ("2024-01-15T12:00:00Z")."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_contribution(contrib: UserContrib, base_url: str) -> Contribution:
    """Map a usercontribs record to a Contribution entity."""
    return Contribution(
        revision_id=contrib.rev_id,
        article_title=contrib.title,
        article_url=article_url(contrib.title, base_url),
        timestamp=parse_timestamp(contrib.timestamp),
        type=classify_contribution(
            contrib.ns, contrib.tags, contrib.parent_id, contrib.size_diff
        ),
        byte_diff=contrib.size_diff,
        summary=contrib.comment,
        is_minor=contrib.minor,
        tags=tuple(contrib.tags),
    )
