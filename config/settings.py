"""
Configuration settings for the nail vibe matcher.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv(Path(__file__).parent.parent / ".env")


@dataclass
class CatalogConfig:
    """Configuration for the Supabase-backed vibe catalog."""

    supabase_url: Optional[str] = field(
        default_factory=lambda: os.getenv("SUPABASE_URL")
    )
    supabase_key: Optional[str] = field(
        default_factory=lambda: os.getenv("SUPABASE_KEY")
    )

    # Tables
    vibe_table: str = "vibe_ideas"
    prompt_table: str = "user_prompts"

    # Analytics writes run on a daemon thread so they never delay a match
    background_analytics: bool = True


@dataclass
class MatchConfig:
    """Configuration for tag extraction and prioritized matching."""

    # One of: uniform, top_score, proportional
    # "uniform" picks anywhere in the score-sorted candidate list
    selection: str = "uniform"

    # Add prompt words that are literal catalog tags to the extracted tags
    augment_with_catalog_tags: bool = False
    tag_cache_ttl_seconds: float = 600.0

    # Cap on rows fetched when building the catalog tag vocabulary
    vocabulary_row_limit: int = 1000


@dataclass
class ReplicateConfig:
    """Configuration for the Replicate image-generation API."""

    api_token: Optional[str] = None
    base_url: str = "https://api.replicate.com/v1"

    # Model selections
    refine_version: str = "black-forest-labs/flux-1.1-pro"
    generate_version: str = (
        "stability-ai/sdxl:"
        "39ed52f2a78e934b3ba6e2a89f5b1c712de7dfea535525255b1aa35c5565e08b"
    )

    # Polling (60 x 5s = 5 minutes max wait)
    poll_interval_seconds: float = 5.0
    max_poll_attempts: int = 60
    timeout_seconds: float = 30.0

    # Generation settings
    guidance_scale: float = 7.5
    num_inference_steps: int = 50
    image_size: int = 1024
    negative_prompt: str = "blurry, low quality, distorted, ugly, bad anatomy"


@dataclass
class ServerConfig:
    """Configuration for the Flask API server."""

    host: str = "127.0.0.1"
    port: int = 5001
    debug: bool = False


@dataclass
class AppConfig:
    """Main configuration combining all settings."""

    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    matching: MatchConfig = field(default_factory=MatchConfig)
    replicate: ReplicateConfig = field(default_factory=ReplicateConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


# Default configuration instance
config = AppConfig()
