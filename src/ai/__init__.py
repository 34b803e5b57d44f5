"""
AI Service Module

Image generation for nail designs via Replicate:
- Refine a matched catalog design with a follow-up prompt (Flux)
- Generate a brand-new design from a prompt (SDXL)

Configuration:
- Sign up at https://replicate.com
- Get an API token from your account settings
- Add to .env: REPLICATE_API_TOKEN=r8_...
"""

from .replicate_client import ReplicateClient, ReplicateError, validate_image_url

__all__ = [
    "ReplicateClient",
    "ReplicateError",
    "validate_image_url",
]
