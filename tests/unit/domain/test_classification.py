"""Unit tests for contribution classification and record mapping."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from wikidash.domain.classification import (
    article_url,
    classify_contribution,
    parse_timestamp,
    to_contribution,
)
from wikidash.models.contribution import ContributionType
from wikidash.services.wikimedia.types import UserContrib


def _contrib(**overrides: object) -> UserContrib:
    base = dict(
        rev_id=100,
        parent_id=99,
        page_id=7,
        ns=0,
        title="Alpha Beta",
        timestamp="2026-03-10T12:00:00Z",
        comment="copyedit",
        size=2048,
        size_diff=12,
        minor=True,
        tags=[],
    )
    base.update(overrides)
    return UserContrib(**base)


class TestClassifyContribution:
    """Tests for the first-match-wins classification order."""

    @pytest.mark.parametrize("ns", [1, 3, 5])
    def test_talk_namespaces(self, ns):
        assert classify_contribution(ns, [], 99, 10) is ContributionType.TALK_PAGE

    def test_talk_page_wins_over_revert_and_creation(self):
        result = classify_contribution(1, ["mw-rollback-revert"], 0, 5000)
        assert result is ContributionType.TALK_PAGE

    @pytest.mark.parametrize("tag", ["mw-undo", "mw-manual-revert", "mw-reverted-revert"])
    def test_revert_tags(self, tag):
        assert classify_contribution(0, [tag], 99, 10) is ContributionType.REVERT

    def test_revert_wins_over_new_article(self):
        assert classify_contribution(0, ["mw-undo"], 0, 10) is ContributionType.REVERT

    def test_new_article(self):
        assert classify_contribution(0, [], 0, 3000) is ContributionType.NEW_ARTICLE

    def test_new_article_wins_over_size(self):
        assert classify_contribution(0, [], 0, 50_000) is ContributionType.NEW_ARTICLE

    @pytest.mark.parametrize("diff", [1001, -1001, 20_000])
    def test_major_expansion_by_absolute_size(self, diff):
        assert classify_contribution(0, [], 99, diff) is ContributionType.MAJOR_EXPANSION

    @pytest.mark.parametrize("diff", [0, 1000, -1000, 3])
    def test_minor_edit_at_or_below_threshold(self, diff):
        assert classify_contribution(0, [], 99, diff) is ContributionType.MINOR_EDIT

    def test_user_namespace_is_not_talk(self):
        assert classify_contribution(2, [], 99, 10) is ContributionType.MINOR_EDIT

    def test_unrelated_tags_are_ignored(self):
        assert classify_contribution(0, ["visualeditor"], 99, 10) is ContributionType.MINOR_EDIT


class TestMapping:
    """Tests for turning usercontribs records into Contribution entities."""

    def test_parse_timestamp_is_utc_aware(self):
        assert parse_timestamp("2026-03-10T12:00:00Z") == datetime(2026, 3, 10, 12, tzinfo=UTC)

    def test_article_url_uses_underscores(self):
        assert article_url("Alpha Beta") == "https://en.wikipedia.org/wiki/Alpha_Beta"

    def test_article_url_custom_base(self):
        assert article_url("X", "https://de.wikipedia.org/wiki/") == "https://de.wikipedia.org/wiki/X"

    def test_to_contribution(self):
        c = to_contribution(_contrib(tags=["mw-undo"]), "https://en.wikipedia.org/wiki/")

        assert c.revision_id == 100
        assert c.article_title == "Alpha Beta"
        assert c.article_url == "https://en.wikipedia.org/wiki/Alpha_Beta"
        assert c.timestamp == datetime(2026, 3, 10, 12, tzinfo=UTC)
        assert c.type is ContributionType.REVERT
        assert c.byte_diff == 12
        assert c.summary == "copyedit"
        assert c.is_minor is True
        assert c.tags == ("mw-undo",)
