"""
Read-through cache of the catalog tag vocabulary.

The vocabulary is fetched once (concurrent callers wait on the same
fetch) and served from memory until it expires or is invalidated.
"""

import threading
import time
from typing import Callable, Iterable, Optional

from rich.console import Console

console = Console()


class CatalogTagCache:
    """Process-wide cache for the distinct tags used in the catalog."""

    def __init__(
        self,
        fetch: Callable[[], list[str]],
        ttl_seconds: Optional[float] = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            fetch: Loads the vocabulary, e.g. catalog.list_all_tags
            ttl_seconds: Seconds before a reload; None keeps tags forever
            clock: Monotonic time source
        """
        self._fetch = fetch
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._tags: Optional[tuple[str, ...]] = None
        self._loaded_at: float = 0.0

    @property
    def is_loaded(self) -> bool:
        return self._tags is not None and not self._expired()

    def _expired(self) -> bool:
        if self.ttl_seconds is None:
            return False
        return self._clock() - self._loaded_at >= self.ttl_seconds

    def get(self) -> tuple[str, ...]:
        """Return the vocabulary, loading it on first use or after expiry."""
        tags = self._tags
        if tags is not None and not self._expired():
            return tags

        with self._lock:
            # Another thread may have finished the fetch while we waited
            if self._tags is not None and not self._expired():
                return self._tags

            try:
                fetched = self._fetch()
            except Exception as e:
                console.print(f"[yellow]Warning: could not load catalog tags: {e}[/yellow]")
                return ()

            if not fetched:
                # Nothing worth caching; try again next time
                return ()

            self._store(fetched)
            return self._tags

    def prime(self, tags: Iterable[str]) -> None:
        """Seed the cache without calling the fetcher."""
        with self._lock:
            self._store(tags)

    def invalidate(self) -> None:
        """Drop cached tags; the next get() refetches."""
        with self._lock:
            self._tags = None
            self._loaded_at = 0.0

    def _store(self, tags: Iterable[str]) -> None:
        cleaned = []
        for tag in tags:
            value = " ".join(str(tag).split()).lower()
            if value and value not in cleaned:
                cleaned.append(value)
        self._tags = tuple(cleaned)
        self._loaded_at = self._clock()
