"""
In-memory catalog backed by a list of rows.

Mirrors SupabaseCatalog semantics for local runs (a JSON export of the
`vibe_ideas` table) and for tests.
"""

import json
import random
from collections import Counter
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import ValidationError
from rich.console import Console

from src.loaders.catalog_store import normalize_query_tags
from src.loaders.models import CatalogEntry

console = Console()


class InMemoryCatalog:
    """List-backed catalog with the same query surface as SupabaseCatalog."""

    def __init__(
        self,
        entries: Iterable[Union[CatalogEntry, dict]] = (),
        rng: Optional[random.Random] = None,
    ):
        self.entries: list[CatalogEntry] = []
        for entry in entries:
            if isinstance(entry, CatalogEntry):
                self.entries.append(entry)
                continue
            try:
                self.entries.append(CatalogEntry.model_validate(entry))
            except ValidationError as e:
                console.print(
                    f"[yellow]Warning: skipping malformed catalog row: "
                    f"{e.error_count()} validation error(s)[/yellow]"
                )
        self.rng = rng or random.Random()
        self.recorded_prompts: list[dict] = []

    @classmethod
    def from_json_file(cls, path: Union[str, Path], **kwargs) -> "InMemoryCatalog":
        """
        Load catalog rows from a JSON file.

        The file holds either a list of rows or {"vibe_ideas": [rows]}.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get("vibe_ideas", [])
        if not isinstance(data, list):
            raise ValueError(f"Catalog file {path} must contain a list of rows")

        return cls(data, **kwargs)

    def find_all_tags_match(self, tags: list[str]) -> list[CatalogEntry]:
        query_tags = normalize_query_tags(tags)
        if not query_tags:
            return []
        return [e for e in self.entries if all(t in e.tags for t in query_tags)]

    def find_any_tags_match(self, tags: list[str]) -> list[CatalogEntry]:
        query_tags = normalize_query_tags(tags)
        if not query_tags:
            return []
        return [e for e in self.entries if any(t in e.tags for t in query_tags)]

    def find_random_entry(self) -> Optional[CatalogEntry]:
        if not self.entries:
            return None
        return self.rng.choice(self.entries)

    def get_entries(self, limit: int = 5) -> list[CatalogEntry]:
        return self.entries[:limit]

    def list_all_tags(self, limit: int = 1000) -> list[str]:
        tags: list[str] = []
        for entry in self.entries[:limit]:
            for tag in entry.tags:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def get_stats(self) -> dict:
        counts: Counter = Counter()
        for entry in self.entries:
            counts.update(entry.tags)
        return {
            "total_entries": len(self.entries),
            "distinct_tags": len(counts),
            "top_tags": counts.most_common(15),
        }

    def record_prompt(self, prompt_text: str, matched_vibe_id: str) -> bool:
        self.recorded_prompts.append(
            {"prompt_text": prompt_text, "matched_vibe_id": matched_vibe_id}
        )
        return True
