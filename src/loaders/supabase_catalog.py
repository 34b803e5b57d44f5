"""
Supabase catalog for matching prompts to pre-made nail designs.

Reads tagged designs from the `vibe_ideas` table and appends prompt
analytics to `user_prompts`. Every store failure is caught here and
reported as an empty result so the matcher can keep falling back.
"""

import os
import random
from collections import Counter
from typing import Callable, Optional

from pydantic import ValidationError
from rich.console import Console
from supabase import Client, create_client

from config.settings import CatalogConfig
from src.loaders.catalog_store import normalize_query_tags
from src.loaders.models import CatalogEntry

console = Console()


class SupabaseCatalog:
    """
    Catalog query adapter backed by Supabase.

    - Tag containment / overlap queries -> PostgreSQL array operators
    - Random fallback row -> exact count + random offset
    - Prompt analytics -> best-effort insert
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        vibe_table: str = "vibe_ideas",
        prompt_table: str = "user_prompts",
        client: Optional[Client] = None,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        """
        Initialize the Supabase catalog.

        Args:
            supabase_url: Supabase project URL (or set SUPABASE_URL env var)
            supabase_key: Supabase anon/service key (or set SUPABASE_KEY env var)
            vibe_table: Table holding catalog entries
            prompt_table: Table receiving prompt analytics
            client: Pre-built Supabase client (skips credential lookup)
            rng: Random source for the fallback row
            verbose: Print a line for every query
        """
        if client is None:
            self.supabase_url = supabase_url or os.getenv("SUPABASE_URL")
            self.supabase_key = supabase_key or os.getenv("SUPABASE_KEY")

            if not self.supabase_url or not self.supabase_key:
                raise ValueError(
                    "Supabase credentials required. Set SUPABASE_URL and SUPABASE_KEY "
                    "environment variables or pass them to the constructor."
                )
            client = create_client(self.supabase_url, self.supabase_key)

        self.client: Client = client
        self.vibe_table = vibe_table
        self.prompt_table = prompt_table
        self.rng = rng or random.Random()
        self.verbose = verbose

    @classmethod
    def from_config(cls, catalog_config: CatalogConfig, **kwargs) -> "SupabaseCatalog":
        """Build a catalog from CatalogConfig settings."""
        return cls(
            supabase_url=catalog_config.supabase_url,
            supabase_key=catalog_config.supabase_key,
            vibe_table=catalog_config.vibe_table,
            prompt_table=catalog_config.prompt_table,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------------

    def _run(self, label: str, build_query: Callable) -> Optional[list[dict]]:
        """Execute a query, returning None when the store fails."""
        try:
            result = build_query().execute()
        except Exception as e:
            console.print(f"[yellow]Warning: {label} query failed: {e}[/yellow]")
            return None

        rows = result.data or []
        if not isinstance(rows, list):
            console.print(
                f"[yellow]Warning: {label} returned malformed data "
                f"({type(rows).__name__})[/yellow]"
            )
            return None

        if self.verbose:
            console.print(f"[dim]  {label}: {len(rows)} rows[/dim]")
        return rows

    def _to_entries(self, label: str, rows: Optional[list]) -> list[CatalogEntry]:
        """Validate rows, skipping any that do not parse."""
        entries = []
        for row in rows or []:
            try:
                entries.append(CatalogEntry.model_validate(row))
            except ValidationError as e:
                console.print(
                    f"[yellow]Warning: skipping malformed row from {label}: "
                    f"{e.error_count()} validation error(s)[/yellow]"
                )
        return entries

    # -------------------------------------------------------------------------
    # Catalog queries
    # -------------------------------------------------------------------------

    def find_all_tags_match(self, tags: list[str]) -> list[CatalogEntry]:
        """
        Find entries whose tags contain ALL of the given tags.

        Args:
            tags: Tags that must all be present (empty -> no results)

        Returns:
            Matching entries, or [] if the query fails
        """
        query_tags = normalize_query_tags(tags)
        if not query_tags:
            return []

        rows = self._run(
            "find_all_tags_match",
            lambda: self.client.table(self.vibe_table)
            .select("*")
            .contains("tags", query_tags),
        )
        return self._to_entries("find_all_tags_match", rows)

    def find_any_tags_match(self, tags: list[str]) -> list[CatalogEntry]:
        """
        Find entries sharing ANY of the given tags.

        Args:
            tags: Tags to look for (empty -> no results)

        Returns:
            Matching entries, or [] if the query fails
        """
        query_tags = normalize_query_tags(tags)
        if not query_tags:
            return []

        rows = self._run(
            "find_any_tags_match",
            lambda: self.client.table(self.vibe_table)
            .select("*")
            .overlaps("tags", query_tags),
        )
        return self._to_entries("find_any_tags_match", rows)

    def find_random_entry(self) -> Optional[CatalogEntry]:
        """
        Pick an arbitrary entry as a last-resort fallback.

        Returns:
            A random entry, or None if the catalog is empty or unreachable
        """
        try:
            count_result = (
                self.client.table(self.vibe_table)
                .select("id", count="exact")
                .limit(1)
                .execute()
            )
        except Exception as e:
            console.print(f"[yellow]Warning: find_random_entry count failed: {e}[/yellow]")
            return None

        total = count_result.count or 0
        if total <= 0:
            return None

        offset = self.rng.randrange(total)
        rows = self._run(
            "find_random_entry",
            lambda: self.client.table(self.vibe_table)
            .select("*")
            .range(offset, offset),
        )
        if not rows:
            # Table shrank between the two queries
            rows = self._run(
                "find_random_entry",
                lambda: self.client.table(self.vibe_table).select("*").limit(1),
            )

        entries = self._to_entries("find_random_entry", rows)
        return entries[0] if entries else None

    def get_entries(self, limit: int = 5) -> list[CatalogEntry]:
        """
        Retrieve the first entries of the catalog.

        Args:
            limit: Maximum number of entries to return
        """
        rows = self._run(
            "get_entries",
            lambda: self.client.table(self.vibe_table).select("*").limit(limit),
        )
        return self._to_entries("get_entries", rows)

    def list_all_tags(self, limit: int = 1000) -> list[str]:
        """
        Collect the distinct tags used in the catalog.

        Args:
            limit: Maximum number of rows to scan
        """
        rows = self._run(
            "list_all_tags",
            lambda: self.client.table(self.vibe_table).select("tags").limit(limit),
        )
        tags: list[str] = []
        for row in rows or []:
            for tag in normalize_query_tags(row.get("tags") if isinstance(row, dict) else None):
                if tag not in tags:
                    tags.append(tag)
        return tags

    def get_stats(self) -> dict:
        """
        Get catalog statistics.

        Tag counts cover the rows the API returns in one page; the entry
        total comes from an exact count.

        Returns:
            Dict with entry count and the most used tags
        """
        # Total count
        try:
            total_result = (
                self.client.table(self.vibe_table).select("id", count="exact").execute()
            )
            total = total_result.count
        except Exception as e:
            console.print(f"[yellow]Warning: get_stats count failed: {e}[/yellow]")
            total = None

        # Tag usage
        rows = self._run(
            "get_stats",
            lambda: self.client.table(self.vibe_table).select("tags"),
        )
        counts: Counter = Counter()
        for row in rows or []:
            if isinstance(row, dict):
                counts.update(normalize_query_tags(row.get("tags")))

        return {
            "total_entries": total if total is not None else len(rows or []),
            "distinct_tags": len(counts),
            "top_tags": counts.most_common(15),
        }

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def record_prompt(self, prompt_text: str, matched_vibe_id: str) -> bool:
        """
        Save a user prompt and the design it matched.

        Not critical for the user: failures are logged and reported as False.
        """
        try:
            self.client.table(self.prompt_table).insert(
                {"prompt_text": prompt_text, "matched_vibe_id": matched_vibe_id}
            ).execute()
        except Exception as e:
            console.print(f"[yellow]Warning: Failed to save user prompt: {e}[/yellow]")
            return False

        if self.verbose:
            console.print("[dim]✓ User prompt saved[/dim]")
        return True
