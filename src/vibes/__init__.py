"""
Vibe Matching Module

Matches free-text aesthetic prompts to pre-made nail designs:
- Tag dictionary (concepts, modifiers, general keywords)
- Tag extraction with optional catalog-vocabulary augmentation
- Four-tier prioritized matching with weighted random selection
- Display titles for matched designs

Configuration:
- Set SUPABASE_URL and SUPABASE_KEY in .env for the hosted catalog
- Or load a JSON export with InMemoryCatalog.from_json_file()
"""

from src.loaders.models import CatalogEntry

from .matcher import (
    MATCH_TYPES,
    MatchResult,
    PrioritizedMatcher,
    SearchOutcome,
    SELECTION_STRATEGIES,
)
from .service import VibeService
from .tag_cache import CatalogTagCache
from .tag_extractor import (
    augment_with_catalog_tags,
    debug_tag_extraction,
    extract_tags,
    get_tags_from_prompt,
    TagExtractionResult,
)
from .title_generator import generate_title

__all__ = [
    # Models
    "CatalogEntry",
    "TagExtractionResult",
    "MatchResult",
    "SearchOutcome",
    # Extraction
    "extract_tags",
    "get_tags_from_prompt",
    "augment_with_catalog_tags",
    "debug_tag_extraction",
    "CatalogTagCache",
    # Matching
    "PrioritizedMatcher",
    "VibeService",
    "MATCH_TYPES",
    "SELECTION_STRATEGIES",
    # Titles
    "generate_title",
]
