"""
Catalog models for pre-made nail designs ("vibe ideas").
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogEntry(BaseModel):
    """Validated catalog row. Read-only once built."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    image_url: str
    tags: list[str] = Field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None
    source_url: Optional[str] = None
    mask_url: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Accept integer or UUID primary keys."""
        if v is None or str(v).strip() == "":
            raise ValueError("catalog entry requires an id")
        return str(v).strip()

    @field_validator("image_url")
    @classmethod
    def require_image_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("catalog entry requires an image_url")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> list:
        """Lowercase, trim and de-duplicate tags, keeping their order."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        elif not isinstance(v, (list, tuple)):
            raise ValueError(f"tags must be a list of strings, got {type(v).__name__}")
        seen = set()
        result = []
        for item in v:
            cleaned = re.sub(r"\s+", " ", str(item)).strip().lower()
            if cleaned and cleaned not in seen:
                seen.add(cleaned)
                result.append(cleaned)
        return result

    @field_validator("title", "description", "source_url", "mask_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        v = v.strip()
        return v if v else None

    def has_tag(self, tag: str) -> bool:
        return tag.lower() in self.tags

    def to_dict(self) -> dict:
        """Convert to the catalog row shape used by the API."""
        return self.model_dump()
