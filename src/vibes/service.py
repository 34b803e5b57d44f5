"""
Vibe Service

Caller-facing entry point: prompt text in, one matched nail design out.

    prompt -> extract_tags -> (optional catalog tag augmentation)
           -> PrioritizedMatcher -> response dict (+ best-effort analytics)

Usage:
    from src.loaders.supabase_catalog import SupabaseCatalog
    from src.vibes.service import VibeService

    service = VibeService(SupabaseCatalog())
    response = service.find_best_match("Harry Potter cutesy")
    if response["success"]:
        response["data"]["entry"]["image_url"]
"""

import random
import threading
from typing import Optional

from rich.console import Console

from config.settings import MatchConfig
from src.loaders.catalog_store import CatalogStore
from src.vibes.matcher import MatchResult, PrioritizedMatcher
from src.loaders.models import CatalogEntry
from src.vibes.tag_cache import CatalogTagCache
from src.vibes.tag_extractor import (
    augment_with_catalog_tags,
    extract_tags,
    TagExtractionResult,
)
from src.vibes.title_generator import generate_title

console = Console()


NO_TAGS_MESSAGE = (
    "Could not extract any tags from the prompt. Please try being more "
    "specific about the style, colors, or occasion."
)
CATALOG_EMPTY_MESSAGE = "No nail designs are available yet. Please try again later."


class VibeService:
    """
    Matches free-text prompts to catalog designs.

    Failures are returned, never raised:
    - no tags extracted -> user-actionable message, catalog not queried
    - empty catalog -> failure after every search tier came back empty
    Analytics writes never affect the returned match.
    """

    def __init__(
        self,
        store: CatalogStore,
        matcher: Optional[PrioritizedMatcher] = None,
        tag_cache: Optional[CatalogTagCache] = None,
        match_config: Optional[MatchConfig] = None,
        background_analytics: bool = False,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        self.store = store
        self.config = match_config or MatchConfig()
        self.rng = rng or random.Random()
        self.matcher = matcher or PrioritizedMatcher(
            store, selection=self.config.selection, rng=self.rng, verbose=verbose
        )

        if tag_cache is None and self.config.augment_with_catalog_tags:
            limit = self.config.vocabulary_row_limit
            tag_cache = CatalogTagCache(
                lambda: store.list_all_tags(limit),
                ttl_seconds=self.config.tag_cache_ttl_seconds,
            )
        self.tag_cache = tag_cache

        self.background_analytics = background_analytics
        self.verbose = verbose

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    def extract(self, prompt: str) -> TagExtractionResult:
        """Extract tags, adding literal catalog tags when a cache is set."""
        result = extract_tags(prompt)
        if self.tag_cache is not None and isinstance(prompt, str) and prompt.strip():
            result = augment_with_catalog_tags(result, self.tag_cache.get())
        return result

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def find_best_match(self, prompt: str) -> dict:
        """
        Find the best matching design for a user prompt.

        Args:
            prompt: User's natural language prompt

        Returns:
            Dict with success flag, match data, extracted tags and the
            search strategy; `error` explains any failure
        """
        extraction = self.extract(prompt)
        response = {
            "success": False,
            "data": None,
            "extracted_tags": list(extraction.combined_tags),
            "primary_tags": list(extraction.primary_tags),
            "modifier_tags": list(extraction.modifier_tags),
            "matched_concept": extraction.matched_concept,
            "search_strategy": "none",
            "error": None,
        }

        if extraction.is_empty:
            response["error"] = NO_TAGS_MESSAGE
            return response

        if self.verbose:
            console.print(f"[cyan]🏷️  Extracted tags: {extraction.combined_tags}[/cyan]")

        outcome = self.matcher.match(extraction.primary_tags, extraction.modifier_tags)
        response["search_strategy"] = outcome.search_strategy

        if not outcome.success:
            response["error"] = (
                NO_TAGS_MESSAGE if outcome.error_kind == "no_tags" else CATALOG_EMPTY_MESSAGE
            )
            return response

        match = outcome.result
        response["success"] = True
        response["data"] = self._match_data(match, prompt, extraction)

        self.record_prompt(prompt, match.entry.id)
        return response

    def _match_data(
        self, match: MatchResult, prompt: str, extraction: TagExtractionResult
    ) -> dict:
        return {
            "entry": match.entry.to_dict(),
            "match_type": match.match_type,
            "match_score": match.match_score,
            "primary_matches": match.primary_matches,
            "modifier_matches": match.modifier_matches,
            "title": generate_title(prompt, extraction.matched_concept, rng=self.rng),
        }

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def record_prompt(self, prompt: str, matched_vibe_id: str) -> None:
        """Save the prompt for analytics without ever failing the caller."""
        if self.background_analytics:
            threading.Thread(
                target=self._record_prompt_safely,
                args=(prompt, matched_vibe_id),
                daemon=True,
            ).start()
        else:
            self._record_prompt_safely(prompt, matched_vibe_id)

    def _record_prompt_safely(self, prompt: str, matched_vibe_id: str) -> None:
        try:
            saved = self.store.record_prompt(prompt, matched_vibe_id)
        except Exception as e:
            console.print(f"[yellow]Warning: Error saving user prompt: {e}[/yellow]")
            return
        if not saved and self.verbose:
            console.print("[yellow]Warning: user prompt was not saved[/yellow]")

    # -------------------------------------------------------------------------
    # Previews
    # -------------------------------------------------------------------------

    def get_random_vibes(self, limit: int = 5) -> list[CatalogEntry]:
        """Return a few catalog designs for previews; [] on failure."""
        try:
            return list(self.store.get_entries(limit))
        except Exception as e:
            console.print(f"[red]Error fetching vibes: {e}[/red]")
            return []
