"""
pytest configuration and shared fixtures for nail vibe matcher tests.
"""

import random
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.loaders.memory_catalog import InMemoryCatalog

SAMPLE_CATALOG = project_root / "data" / "sample_vibe_ideas.json"


def make_row(vibe_id, tags, **extra):
    """Build a vibe_ideas row with a predictable image URL."""
    row = {
        "id": vibe_id,
        "image_url": f"https://images.example.com/vibes/{vibe_id}.jpg",
        "tags": tags,
    }
    row.update(extra)
    return row


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_catalog(rng):
    """Factory for small in-memory catalogs."""

    def _make(*rows):
        return InMemoryCatalog(rows, rng=rng)

    return _make


@pytest.fixture
def sample_catalog_path():
    return SAMPLE_CATALOG
