"""
Vibe Tag Extractor

Turns a free-text prompt ("Harry Potter cutesy", "matte finish, simple")
into catalog tags.

Extraction runs in two modes:
- Concept mode: the first known concept phrase (table order) supplies the
  primary tags; the rest of the prompt is scanned for modifier tags.
- Keyword mode: no concept found; modifier and general keyword matches on
  the whole prompt become the primary tags.

Usage:
    from src.vibes.tag_extractor import extract_tags

    result = extract_tags("barbie glam metallic")
    result.primary_tags    # ["pink", "glam", "girly", "playful"]
    result.modifier_tags   # ["metallic"]
    result.combined_tags   # primary first, then unseen modifiers
"""

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional

from rich.console import Console
from rich.table import Table

from .tag_dictionary import CONCEPT_MAP, concept_tags, GENERAL_KEYWORD_MAP, MODIFIER_MAP

console = Console()

# Characters stripped from the edges of prompt words before exact matching
_PUNCTUATION = ".,!?;:\"'()[]{}"


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass
class TagExtractionResult:
    """Tags extracted from a single prompt."""

    primary_tags: list[str] = field(default_factory=list)
    modifier_tags: list[str] = field(default_factory=list)
    matched_concept: Optional[str] = None
    combined_tags: list[str] = field(default_factory=list)
    remaining_prompt: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.combined_tags

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and API responses."""
        return {
            "primary_tags": list(self.primary_tags),
            "modifier_tags": list(self.modifier_tags),
            "matched_concept": self.matched_concept,
            "combined_tags": list(self.combined_tags),
            "remaining_prompt": self.remaining_prompt,
        }


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def _dedupe(tags: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(tags))


def combine_tags(primary_tags: list[str], modifier_tags: list[str]) -> list[str]:
    """Primary tags in order, then modifier tags not already present."""
    combined = _dedupe(primary_tags)
    for tag in modifier_tags:
        if tag not in combined:
            combined.append(tag)
    return combined


def _tokenize(text: str) -> list[str]:
    """Split on whitespace and strip punctuation from each word."""
    words = (word.strip(_PUNCTUATION) for word in text.split())
    return [word for word in words if word]


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


def _concept_pattern(concept: str) -> re.Pattern:
    words = [re.escape(word) for word in concept.split()]
    return re.compile(r"\s+".join(words), re.IGNORECASE)


def _remove_concept(prompt: str, concept: str) -> str:
    """Remove every occurrence of a concept phrase, case-insensitively.

    Removal repeats until the phrase no longer occurs, so text that
    re-forms the phrase after a removal is also cleared.
    """
    pattern = _concept_pattern(concept)
    remaining = prompt
    while pattern.search(remaining):
        remaining = pattern.sub("", remaining)
    return " ".join(remaining.split())


def _match_table(text: str, table: Mapping[str, tuple[str, ...]]) -> list[str]:
    """Return table keys whose key or any synonym occurs in the text.

    A first pass checks substrings in table order; a second pass adds keys
    that equal a whole prompt word and were not already captured.
    """
    lower_text = _normalize(text)
    if not lower_text:
        return []

    matched: list[str] = []
    for key, synonyms in table.items():
        if key in lower_text or any(synonym in lower_text for synonym in synonyms):
            matched.append(key)

    for word in _tokenize(lower_text):
        if word in table and word not in matched:
            matched.append(word)

    return matched


def _find_concept(lower_prompt: str) -> Optional[str]:
    for concept in CONCEPT_MAP:
        if concept in lower_prompt:
            return concept
    return None


# =============================================================================
# MAIN EXTRACTION FUNCTION
# =============================================================================


def extract_tags(prompt) -> TagExtractionResult:
    """
    Extract primary and modifier tags from a user prompt.

    Args:
        prompt: Free-text aesthetic description

    Returns:
        TagExtractionResult; all-empty for blank or non-string input
    """
    if not isinstance(prompt, str) or not prompt.strip():
        return TagExtractionResult()

    trimmed = prompt.strip()
    concept = _find_concept(_normalize(trimmed))

    if concept is not None:
        primary_tags = concept_tags(concept)
        remaining = _remove_concept(trimmed, concept)
        modifier_tags = _match_table(remaining, MODIFIER_MAP)
    else:
        remaining = trimmed
        primary_tags = _dedupe(
            _match_table(trimmed, MODIFIER_MAP)
            + _match_table(trimmed, GENERAL_KEYWORD_MAP)
        )
        modifier_tags = []

    return TagExtractionResult(
        primary_tags=primary_tags,
        modifier_tags=modifier_tags,
        matched_concept=concept,
        combined_tags=combine_tags(primary_tags, modifier_tags),
        remaining_prompt=remaining,
    )


def get_tags_from_prompt(prompt) -> list[str]:
    """Return just the combined tags for a prompt."""
    return extract_tags(prompt).combined_tags


# =============================================================================
# CATALOG TAG AUGMENTATION
# =============================================================================


def augment_with_catalog_tags(
    result: TagExtractionResult, known_tags: Iterable[str]
) -> TagExtractionResult:
    """
    Add prompt words that are literal catalog tags.

    Single-word catalog tags match whole prompt words; multi-word tags
    match as substrings. Found tags join the modifier tags when a concept
    matched, otherwise the primary tags.

    Args:
        result: Output of extract_tags
        known_tags: Tag vocabulary of the catalog

    Returns:
        A new TagExtractionResult (the input is left untouched)
    """
    vocabulary = {tag.strip().lower() for tag in known_tags if tag and tag.strip()}
    text = _normalize(result.remaining_prompt)
    if not vocabulary or not text:
        return result

    found: list[str] = []
    for word in _tokenize(text):
        if word in vocabulary:
            found.append(word)
    for tag in sorted(t for t in vocabulary if " " in t):
        if tag in text:
            found.append(tag)

    new_tags = [tag for tag in _dedupe(found) if tag not in result.combined_tags]
    if not new_tags:
        return result

    if result.matched_concept is not None:
        primary_tags = list(result.primary_tags)
        modifier_tags = list(result.modifier_tags) + new_tags
    else:
        primary_tags = list(result.primary_tags) + new_tags
        modifier_tags = list(result.modifier_tags)

    return replace(
        result,
        primary_tags=primary_tags,
        modifier_tags=modifier_tags,
        combined_tags=combine_tags(primary_tags, modifier_tags),
    )


# =============================================================================
# DEBUGGING
# =============================================================================


def _triggers(text: str, table: Mapping[str, tuple[str, ...]]) -> dict[str, list[str]]:
    lower_text = _normalize(text)
    triggers = {}
    for key, synonyms in table.items():
        hits = [word for word in (key, *synonyms) if word in lower_text]
        if hits:
            triggers[key] = _dedupe(hits)
    return triggers


def debug_tag_extraction(prompt: str, show: bool = True) -> dict:
    """
    Show which words produced which tags for a prompt.

    Returns:
        Dict with the extraction result and the triggering words per tag
    """
    result = extract_tags(prompt)
    scan_text = result.remaining_prompt if result.matched_concept else (prompt or "")

    matched_keywords = _triggers(scan_text, MODIFIER_MAP)
    if result.matched_concept is None:
        for key, hits in _triggers(scan_text, GENERAL_KEYWORD_MAP).items():
            matched_keywords.setdefault(key, hits)

    if show:
        table = Table(title=f'Tag extraction: "{prompt}"')
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Matched concept", result.matched_concept or "-")
        table.add_row("Primary tags", ", ".join(result.primary_tags) or "-")
        table.add_row("Remaining prompt", result.remaining_prompt or "-")
        table.add_row("Modifier tags", ", ".join(result.modifier_tags) or "-")
        table.add_row("Combined tags", ", ".join(result.combined_tags) or "-")
        console.print(table)

    return {
        "prompt": prompt,
        **result.to_dict(),
        "matched_keywords": matched_keywords,
    }
