from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ContributionType(str, Enum):
    """What kind of edit a revision was."""

    MAJOR_EXPANSION = "major_expansion"
    MINOR_EDIT = "minor_edit"
    NEW_ARTICLE = "new_article"
    REVERT = "revert"
    TALK_PAGE = "talk_page"


@dataclass(frozen=True)
class Contribution:
    """A single revision made by the editor."""

    revision_id: int
    article_title: str
    article_url: str
    timestamp: datetime
    type: ContributionType
    byte_diff: int
    summary: str
    is_minor: bool
    tags: tuple[str, ...] = ()
