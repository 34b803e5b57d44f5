"""
Prioritized Vibe Matcher

Finds one catalog design for a set of extracted tags, trying four tiers
from most to least specific:

1. all_primary   - entries carrying ALL primary tags
2. some_primary  - entries carrying ANY primary tag
3. any_tags      - entries carrying ANY primary or modifier tag
4. fallback      - a random entry

The first tier with results wins; candidates are scored, sorted and one is
picked at random according to the selection strategy.

Usage:
    from src.vibes.matcher import PrioritizedMatcher

    matcher = PrioritizedMatcher(catalog)
    outcome = matcher.match(["pink", "glam"], ["metallic"])
    if outcome.success:
        outcome.result.entry.image_url
"""

import random
from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console

from src.loaders.catalog_store import CatalogStore, normalize_query_tags
from src.loaders.models import CatalogEntry

console = Console()


# =============================================================================
# CONSTANTS
# =============================================================================

MATCH_TYPES = ("all_primary", "some_primary", "any_tags", "fallback")

SEARCH_STRATEGIES = {
    "all_primary": "all_primary_tags",
    "some_primary": "some_primary_tags",
    "any_tags": "any_tags",
    "fallback": "random_fallback",
}

# uniform: any candidate in the sorted list, regardless of score
# top_score: any candidate tied for the best score
# proportional: probability proportional to score
SELECTION_STRATEGIES = ("uniform", "top_score", "proportional")

MODIFIER_BOOST = 0.5
ANY_TAGS_PRIMARY_WEIGHT = 2
ANY_TAGS_MODIFIER_WEIGHT = 1

NO_TAGS_ERROR = "No tags provided for search"
CATALOG_EMPTY_ERROR = "No designs found in database"


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass
class MatchResult:
    """A chosen catalog entry and how it was found."""

    entry: CatalogEntry
    match_score: float
    primary_matches: int
    modifier_matches: int
    match_type: str
    search_strategy: str

    def to_dict(self) -> dict:
        return {
            "entry": self.entry.to_dict(),
            "match_score": self.match_score,
            "primary_matches": self.primary_matches,
            "modifier_matches": self.modifier_matches,
            "match_type": self.match_type,
            "search_strategy": self.search_strategy,
        }


@dataclass
class SearchOutcome:
    """Outcome of one match call: a result, or a failure kind and message."""

    success: bool
    search_strategy: str
    result: Optional[MatchResult] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # "no_tags" | "catalog_empty"


# =============================================================================
# SCORING
# =============================================================================


def _count_hits(entry: CatalogEntry, tags: list[str]) -> int:
    return sum(1 for tag in tags if entry.has_tag(tag))


def boost_with_modifier_tags(
    entries: list[CatalogEntry], modifier_tags: list[str], match_type: str
) -> list[MatchResult]:
    """
    Score entries from a primary-tag tier.

    The entry's own tag count stands in for specificity; each modifier tag
    the entry also carries adds MODIFIER_BOOST.
    """
    results = []
    for entry in entries:
        primary_matches = len(entry.tags)
        modifier_matches = _count_hits(entry, modifier_tags)
        results.append(
            MatchResult(
                entry=entry,
                match_score=primary_matches + modifier_matches * MODIFIER_BOOST,
                primary_matches=primary_matches,
                modifier_matches=modifier_matches,
                match_type=match_type,
                search_strategy=SEARCH_STRATEGIES[match_type],
            )
        )
    return results


def score_any_tag_matches(
    entries: list[CatalogEntry], primary_tags: list[str], modifier_tags: list[str]
) -> list[MatchResult]:
    """Score entries by weighted primary and modifier tag hits."""
    results = []
    for entry in entries:
        primary_matches = _count_hits(entry, primary_tags)
        modifier_matches = _count_hits(entry, modifier_tags)
        results.append(
            MatchResult(
                entry=entry,
                match_score=(
                    primary_matches * ANY_TAGS_PRIMARY_WEIGHT
                    + modifier_matches * ANY_TAGS_MODIFIER_WEIGHT
                ),
                primary_matches=primary_matches,
                modifier_matches=modifier_matches,
                match_type="any_tags",
                search_strategy=SEARCH_STRATEGIES["any_tags"],
            )
        )
    return results


def select_weighted_result(
    results: list[MatchResult],
    rng: random.Random,
    strategy: str = "uniform",
) -> MatchResult:
    """
    Pick one result from a scored tier.

    Args:
        results: Scored candidates (must not be empty)
        rng: Random source
        strategy: One of SELECTION_STRATEGIES

    Raises:
        ValueError: if results is empty or the strategy is unknown
    """
    if not results:
        raise ValueError("No results to select from")
    if strategy not in SELECTION_STRATEGIES:
        raise ValueError(f"Unknown selection strategy: {strategy}")

    if len(results) == 1:
        return results[0]

    ranked = sorted(results, key=lambda r: r.match_score, reverse=True)

    if strategy == "top_score":
        best = ranked[0].match_score
        ranked = [r for r in ranked if r.match_score == best]
    elif strategy == "proportional":
        weights = [max(r.match_score, 0.0) for r in ranked]
        if sum(weights) > 0:
            return rng.choices(ranked, weights=weights, k=1)[0]

    return ranked[rng.randrange(len(ranked))]


# =============================================================================
# MATCHER
# =============================================================================


class PrioritizedMatcher:
    """
    Four-tier matcher over a CatalogStore.

    Stateless between calls; the store is only read.
    """

    def __init__(
        self,
        store: CatalogStore,
        selection: str = "uniform",
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        if selection not in SELECTION_STRATEGIES:
            raise ValueError(
                f"Unknown selection strategy '{selection}'. "
                f"Choose from: {', '.join(SELECTION_STRATEGIES)}"
            )
        self.store = store
        self.selection = selection
        self.rng = rng or random.Random()
        self.verbose = verbose

    def _log(self, message: str) -> None:
        if self.verbose:
            console.print(message)

    def _query(self, label: str, call: Callable, *args):
        """Run a store query; any exception counts as no results."""
        try:
            return call(*args)
        except Exception as e:
            console.print(f"[yellow]Warning: {label} failed: {e}[/yellow]")
            return None

    def _success(self, results: list[MatchResult]) -> SearchOutcome:
        best = select_weighted_result(results, self.rng, self.selection)
        self._log(
            f"[green]✓ {best.match_type}: {len(results)} candidate(s), "
            f"picked {best.entry.id} (score {best.match_score})[/green]"
        )
        return SearchOutcome(
            success=True, search_strategy=best.search_strategy, result=best
        )

    def match(
        self, primary_tags: list[str], modifier_tags: Optional[list[str]] = None
    ) -> SearchOutcome:
        """
        Find the best catalog entry for the given tags.

        Args:
            primary_tags: Core concept tags, searched first
            modifier_tags: Secondary tags used for boosting and the any-tag tier

        Returns:
            SearchOutcome; failure only when no tags were given or the
            catalog has no entries at all
        """
        primary = normalize_query_tags(primary_tags)
        modifiers = normalize_query_tags(modifier_tags)

        self._log(f"[cyan]Prioritized search: primary={primary} modifiers={modifiers}[/cyan]")

        if not primary and not modifiers:
            return SearchOutcome(
                success=False,
                search_strategy="none",
                error=NO_TAGS_ERROR,
                error_kind="no_tags",
            )

        # Strategy 1: ALL primary tags
        if primary:
            entries = self._query(
                "find_all_tags_match", self.store.find_all_tags_match, primary
            )
            if entries:
                return self._success(
                    boost_with_modifier_tags(entries, modifiers, "all_primary")
                )

        # Strategy 2: SOME primary tags
        if primary:
            entries = self._query(
                "find_any_tags_match", self.store.find_any_tags_match, primary
            )
            if entries:
                return self._success(
                    boost_with_modifier_tags(entries, modifiers, "some_primary")
                )

        # Strategy 3: ANY primary or modifier tag
        all_tags = normalize_query_tags(primary + modifiers)
        entries = self._query(
            "find_any_tags_match", self.store.find_any_tags_match, all_tags
        )
        if entries:
            return self._success(score_any_tag_matches(entries, primary, modifiers))

        # Strategy 4: random design
        entry = self._query("find_random_entry", self.store.find_random_entry)
        if entry is not None:
            self._log(f"[yellow]Falling back to random design {entry.id}[/yellow]")
            return SearchOutcome(
                success=True,
                search_strategy=SEARCH_STRATEGIES["fallback"],
                result=MatchResult(
                    entry=entry,
                    match_score=0,
                    primary_matches=0,
                    modifier_matches=0,
                    match_type="fallback",
                    search_strategy=SEARCH_STRATEGIES["fallback"],
                ),
            )

        return SearchOutcome(
            success=False,
            search_strategy="failed",
            error=CATALOG_EMPTY_ERROR,
            error_kind="catalog_empty",
        )
