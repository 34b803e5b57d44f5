"""
Tests for the catalog tag vocabulary cache.

Run with: pytest tests/test_tag_cache.py -v
"""

import threading
import time
from unittest.mock import MagicMock

from src.vibes.tag_cache import CatalogTagCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestCatalogTagCache:
    def test_fetches_once(self):
        fetch = MagicMock(return_value=["Pink", "glam", "pink", " french  tips "])
        cache = CatalogTagCache(fetch)

        assert cache.get() == ("pink", "glam", "french tips")
        assert cache.get() == ("pink", "glam", "french tips")
        fetch.assert_called_once()
        assert cache.is_loaded

    def test_expires_after_ttl(self):
        clock = FakeClock()
        fetch = MagicMock(side_effect=[["pink"], ["pink", "chrome"]])
        cache = CatalogTagCache(fetch, ttl_seconds=60, clock=clock)

        assert cache.get() == ("pink",)
        clock.now = 59
        assert cache.get() == ("pink",)
        clock.now = 60
        assert cache.get() == ("pink", "chrome")
        assert fetch.call_count == 2

    def test_no_ttl_keeps_tags(self):
        clock = FakeClock()
        fetch = MagicMock(return_value=["pink"])
        cache = CatalogTagCache(fetch, ttl_seconds=None, clock=clock)

        cache.get()
        clock.now = 1e9
        cache.get()

        fetch.assert_called_once()

    def test_fetch_failure_is_not_cached(self):
        fetch = MagicMock(side_effect=[RuntimeError("timeout"), ["pink"]])
        cache = CatalogTagCache(fetch)

        assert cache.get() == ()
        assert not cache.is_loaded
        assert cache.get() == ("pink",)

    def test_empty_vocabulary_is_not_cached(self):
        fetch = MagicMock(side_effect=[[], ["pink"]])
        cache = CatalogTagCache(fetch)

        assert cache.get() == ()
        assert cache.get() == ("pink",)

    def test_prime_skips_fetch(self):
        fetch = MagicMock()
        cache = CatalogTagCache(fetch)

        cache.prime(["Chrome"])

        assert cache.get() == ("chrome",)
        fetch.assert_not_called()

    def test_invalidate_forces_reload(self):
        fetch = MagicMock(return_value=["pink"])
        cache = CatalogTagCache(fetch)

        cache.get()
        cache.invalidate()

        assert not cache.is_loaded
        cache.get()
        assert fetch.call_count == 2

    def test_concurrent_callers_share_one_fetch(self):
        calls = []

        def slow_fetch():
            calls.append(1)
            time.sleep(0.05)
            return ["pink"]

        cache = CatalogTagCache(slow_fetch)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.get())) for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert results == [("pink",)] * 8
