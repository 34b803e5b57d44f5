"""
Query interface the matcher needs from a tagged-image catalog.

Implementations must never raise for store trouble: failed queries come
back as an empty list (or None for a single row).
"""

from typing import Optional, Protocol

from src.loaders.models import CatalogEntry


class CatalogStore(Protocol):
    """Read surface of the vibe catalog plus the analytics write."""

    def find_all_tags_match(self, tags: list[str]) -> list[CatalogEntry]:
        """Entries whose tags contain every given tag."""
        ...

    def find_any_tags_match(self, tags: list[str]) -> list[CatalogEntry]:
        """Entries sharing at least one tag with the given tags."""
        ...

    def find_random_entry(self) -> Optional[CatalogEntry]:
        """An arbitrary single entry, or None for an empty catalog."""
        ...

    def list_all_tags(self, limit: int = 1000) -> list[str]:
        """Distinct tags used across the catalog."""
        ...

    def get_entries(self, limit: int = 5) -> list[CatalogEntry]:
        """First entries of the catalog, for previews."""
        ...

    def record_prompt(self, prompt_text: str, matched_vibe_id: str) -> bool:
        """Append an analytics row. Returns False instead of raising."""
        ...


def normalize_query_tags(tags) -> list[str]:
    """Lowercase, trim and de-duplicate query tags, keeping their order."""
    cleaned = []
    for tag in tags or []:
        value = " ".join(str(tag).split()).lower()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned
