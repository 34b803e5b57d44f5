"""
Tests for the four-tier prioritized matcher.

Run with: pytest tests/test_matcher.py -v
"""

import random
from unittest.mock import MagicMock

import pytest

from src.vibes.matcher import (
    boost_with_modifier_tags,
    CATALOG_EMPTY_ERROR,
    MatchResult,
    NO_TAGS_ERROR,
    PrioritizedMatcher,
    score_any_tag_matches,
    select_weighted_result,
)
from src.loaders.models import CatalogEntry
from conftest import make_row

BARBIE = ["pink", "glam", "girly", "playful"]


def entry(vibe_id, tags):
    return CatalogEntry.model_validate(make_row(vibe_id, tags))


def scored(vibe_id, score):
    return MatchResult(
        entry=entry(vibe_id, ["x"]),
        match_score=score,
        primary_matches=0,
        modifier_matches=0,
        match_type="any_tags",
        search_strategy="any_tags",
    )


class TestTierPrecedence:
    """The first tier with results decides the match."""

    def test_all_primary_wins(self, make_catalog, rng):
        catalog = make_catalog(
            make_row("full", BARBIE + ["metallic"]),
            make_row("partial", ["pink"]),
        )
        outcome = PrioritizedMatcher(catalog, rng=rng).match(BARBIE, ["metallic"])

        assert outcome.success
        assert outcome.search_strategy == "all_primary_tags"
        result = outcome.result
        assert result.entry.id == "full"
        assert result.match_type == "all_primary"
        assert result.primary_matches == 5
        assert result.modifier_matches == 1
        assert result.match_score == 5.5

    def test_partial_primary_overlap_is_some_primary(self, make_catalog, rng):
        catalog = make_catalog(make_row("pg", ["pink", "glam"]))
        outcome = PrioritizedMatcher(catalog, rng=rng).match(BARBIE)

        assert outcome.success
        assert outcome.result.match_type == "some_primary"
        assert outcome.search_strategy == "some_primary_tags"
        assert outcome.result.match_score == 2

    def test_modifier_only_overlap_is_any_tags(self, make_catalog, rng):
        catalog = make_catalog(make_row("chrome", ["metallic", "chrome"]))
        outcome = PrioritizedMatcher(catalog, rng=rng).match(["pink", "glam"], ["metallic"])

        assert outcome.result.match_type == "any_tags"
        assert outcome.search_strategy == "any_tags"
        assert outcome.result.primary_matches == 0
        assert outcome.result.modifier_matches == 1
        assert outcome.result.match_score == 1

    def test_no_overlap_falls_back_to_random(self, make_catalog, rng):
        catalog = make_catalog(make_row("blue", ["blue"]))
        outcome = PrioritizedMatcher(catalog, rng=rng).match(["pink"])

        assert outcome.success
        assert outcome.search_strategy == "random_fallback"
        assert outcome.result.match_type == "fallback"
        assert outcome.result.match_score == 0
        assert outcome.result.entry.id == "blue"

    def test_modifiers_alone_skip_primary_tiers(self, make_catalog, rng):
        catalog = make_catalog(make_row("m", ["matte"]))
        outcome = PrioritizedMatcher(catalog, rng=rng).match([], ["matte"])

        assert outcome.result.match_type == "any_tags"

    def test_higher_tier_results_never_lose_to_lower_tier(self, make_catalog, rng):
        catalog = make_catalog(
            make_row("weak", ["pink", "glam"]),
            make_row("strong", ["pink", "glam", "metallic", "chrome", "sparkle"]),
        )
        matcher = PrioritizedMatcher(catalog, rng=rng)

        for _ in range(20):
            outcome = matcher.match(["pink", "glam"], ["metallic"])
            assert outcome.result.match_type == "all_primary"

    def test_query_tags_are_case_insensitive(self, make_catalog, rng):
        catalog = make_catalog(make_row("p", ["pink"]))
        outcome = PrioritizedMatcher(catalog, rng=rng).match([" PINK "])

        assert outcome.result.match_type == "all_primary"


class TestFailures:
    def test_no_tags_does_not_query_store(self):
        store = MagicMock()
        outcome = PrioritizedMatcher(store).match([], [])

        assert not outcome.success
        assert outcome.error == NO_TAGS_ERROR
        assert outcome.error_kind == "no_tags"
        assert outcome.search_strategy == "none"
        assert store.mock_calls == []

    def test_empty_catalog(self, make_catalog):
        outcome = PrioritizedMatcher(make_catalog()).match(BARBIE, ["metallic"])

        assert not outcome.success
        assert outcome.error == CATALOG_EMPTY_ERROR
        assert outcome.error_kind == "catalog_empty"
        assert outcome.search_strategy == "failed"
        assert outcome.result is None

    def test_failing_queries_fall_through_to_random(self):
        store = MagicMock()
        store.find_all_tags_match.side_effect = RuntimeError("connection reset")
        store.find_any_tags_match.side_effect = RuntimeError("connection reset")
        store.find_random_entry.return_value = entry("any", ["blue"])

        outcome = PrioritizedMatcher(store).match(BARBIE)

        assert outcome.success
        assert outcome.result.match_type == "fallback"

    def test_every_query_failing_is_catalog_empty(self):
        store = MagicMock()
        store.find_all_tags_match.side_effect = RuntimeError("down")
        store.find_any_tags_match.side_effect = RuntimeError("down")
        store.find_random_entry.side_effect = RuntimeError("down")

        outcome = PrioritizedMatcher(store).match(BARBIE)

        assert not outcome.success
        assert outcome.error_kind == "catalog_empty"

    def test_unknown_selection_strategy(self, make_catalog):
        with pytest.raises(ValueError, match="Unknown selection strategy"):
            PrioritizedMatcher(make_catalog(), selection="best")


class TestScoring:
    def test_boost_uses_entry_tag_count(self):
        results = boost_with_modifier_tags(
            [entry("a", ["pink", "glam", "matte"])], ["matte", "chrome"], "some_primary"
        )

        assert results[0].primary_matches == 3
        assert results[0].modifier_matches == 1
        assert results[0].match_score == 3.5
        assert results[0].search_strategy == "some_primary_tags"

    def test_any_tag_scoring_weights_primary_double(self):
        results = score_any_tag_matches(
            [entry("a", ["pink", "glam", "matte"])], ["pink", "glam"], ["matte"]
        )

        assert results[0].primary_matches == 2
        assert results[0].modifier_matches == 1
        assert results[0].match_score == 5

    def test_hits_ignore_query_tag_case(self):
        results = score_any_tag_matches([entry("a", ["pink", "matte"])], ["PINK"], ["Matte"])

        assert results[0].primary_matches == 1
        assert results[0].modifier_matches == 1


class TestSelection:
    def test_empty_results(self, rng):
        with pytest.raises(ValueError):
            select_weighted_result([], rng)

    def test_unknown_strategy(self, rng):
        with pytest.raises(ValueError):
            select_weighted_result([scored("a", 1)], rng, "best")

    def test_single_result(self, rng):
        only = scored("a", 1)

        assert select_weighted_result([only], rng) is only

    def test_uniform_can_pick_lowest_score(self):
        pick_last = MagicMock(spec=random.Random)
        pick_last.randrange.side_effect = lambda n: n - 1
        results = [scored("high", 3), scored("low", 1), scored("mid", 2)]

        assert select_weighted_result(results, pick_last, "uniform").entry.id == "low"

    def test_top_score_only_picks_best(self, rng):
        results = [scored("low", 1), scored("best-a", 4), scored("best-b", 4)]

        picks = {select_weighted_result(results, rng, "top_score").entry.id for _ in range(50)}

        assert picks <= {"best-a", "best-b"}

    def test_proportional_never_picks_zero_weight(self, rng):
        results = [scored("zero", 0), scored("only", 3), scored("none", 0)]

        picks = {
            select_weighted_result(results, rng, "proportional").entry.id for _ in range(50)
        }

        assert picks == {"only"}

    def test_proportional_with_all_zero_scores_still_picks(self, rng):
        results = [scored("a", 0), scored("b", 0)]

        assert select_weighted_result(results, rng, "proportional").entry.id in {"a", "b"}

    def test_matcher_uses_configured_strategy(self, make_catalog, rng):
        catalog = make_catalog(
            make_row("short", ["pink"]),
            make_row("long", ["pink", "glam", "nude", "matte"]),
        )
        matcher = PrioritizedMatcher(catalog, selection="top_score", rng=rng)

        for _ in range(20):
            assert matcher.match(["pink"]).result.entry.id == "long"
