"""
Vibe Tag Dictionary

Static lookup tables that turn free-text aesthetic descriptions into
catalog tags. Three tables, scanned in declaration order:

- CONCEPT_MAP: pop-culture / aesthetic phrases -> primary tags
- MODIFIER_MAP: style, colour, texture and occasion words -> synonyms
- GENERAL_KEYWORD_MAP: broad fallback categories -> trigger words,
  only consulted when no concept matches

All tables are read-only views; lists are stored as tuples.
"""

from types import MappingProxyType
from typing import Mapping


def _freeze(table: dict[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


# =============================================================================
# CONCEPTS
# =============================================================================
# Only the first concept contained in a prompt is honored, so longer or more
# specific phrases must be declared before phrases they contain.

CONCEPT_MAP = _freeze(
    {
        # Pop culture & aesthetic cues
        "harry potter": ["witchy", "dark", "mystical", "quirky"],
        "barbie": ["pink", "glam", "girly", "playful"],
        "bridgerton": ["romantic", "floral", "pastel", "elegant"],
        "euphoria": ["sparkle", "neon", "experimental", "bold"],
        "twilight": ["moody", "vampy", "mysterious", "dark"],
        "coastal grandma": ["neutral", "clean", "soft", "natural"],
        "dark academia": ["matte", "moody", "scholarly", "vintage"],
        "cottagecore": ["floral", "pastel", "nature", "whimsical"],
        "clean girl": ["neutral", "minimal", "glossy", "natural"],
        "hot girl walk": ["bold", "confident", "fun", "vibrant"],
        "old money": ["classic", "neutral", "elegant", "timeless"],
        "mob wife": ["bold", "red", "luxury", "dramatic"],
        "balletcore": ["pink", "sheer", "delicate", "graceful"],
        "mermaidcore": ["iridescent", "aqua", "shimmer", "oceanic"],
        "quiet luxury": ["minimal", "neutral", "elegant", "sophisticated"],
        # Seasonal & occasion vibes
        "summer vacation": ["bright", "playful", "tropical", "vibrant"],
        "europe trip": ["chic", "neutral", "effortless", "sophisticated"],
        "napa weekend": ["wine", "earthy", "warm", "rustic"],
        "fall vibes": ["burnt orange", "matte", "cozy", "warm"],
        "holiday party": ["red", "sparkle", "glam", "festive"],
        "wedding guest": ["elegant", "simple", "neutral", "refined"],
        # Colour-specific but vibe-first
        "match my olive dress": ["olive", "earthy", "neutral", "muted"],
        "go with silver jewelry": ["silver", "cool tone", "clean", "metallic"],
        "complement red lipstick": ["bold", "classic", "elegant", "striking"],
        "pair with white linen": ["minimal", "neutral", "clean", "fresh"],
        "accent my tan skin": ["bronze", "warm", "shimmer", "golden"],
        # Mood-based prompts
        "feeling flirty": ["pink", "playful", "glossy", "cute"],
        "want to feel powerful": ["bold", "sharp", "luxury", "confident"],
        "need something low effort": ["neutral", "minimal", "clean", "simple"],
        "trying something edgy": ["black", "matte", "punk", "dramatic"],
        "feeling soft": ["sheer", "pastel", "delicate", "gentle"],
        # Additional pop culture references
        "disney princess": ["pastel", "glittery", "whimsical", "dreamy"],
        "gothic": ["black", "dark", "dramatic", "mysterious"],
        "boho": ["earthy", "natural", "free-spirited", "textured"],
        "minimalist": ["clean", "simple", "neutral", "understated"],
        "maximalist": ["bold", "colorful", "ornate", "dramatic"],
        "vintage": ["retro", "classic", "muted", "nostalgic"],
        "futuristic": ["metallic", "holographic", "geometric", "sleek"],
    }
)


# =============================================================================
# MODIFIERS
# =============================================================================
# A modifier key is emitted as a tag when the key itself or any synonym
# appears in the text.

MODIFIER_MAP = _freeze(
    {
        # Style modifiers
        "cutesy": ["cute", "playful", "sweet", "adorable"],
        "edgy": ["bold", "dramatic", "sharp", "striking"],
        "soft": ["gentle", "delicate", "subtle", "muted"],
        "bold": ["vibrant", "striking", "confident", "dramatic"],
        "subtle": ["understated", "minimal", "refined", "gentle"],
        "glamorous": ["sparkly", "luxurious", "shiny", "elegant"],
        "rustic": ["earthy", "natural", "textured", "organic"],
        "sleek": ["smooth", "modern", "clean", "polished"],
        "whimsical": ["playful", "dreamy", "fantastical", "imaginative"],
        "sophisticated": ["elegant", "refined", "classy", "polished"],
        # Colour modifiers
        "pastel": ["soft", "muted", "gentle", "light"],
        "neon": ["bright", "vibrant", "electric", "fluorescent"],
        "muted": ["subtle", "understated", "soft", "toned-down"],
        "vibrant": ["bright", "bold", "saturated", "lively"],
        "monochrome": ["single-color", "tonal", "unified", "simple"],
        "rainbow": ["multicolor", "spectrum", "varied", "diverse"],
        # Texture / finish modifiers
        "matte": ["flat", "non-glossy", "velvety", "smooth"],
        "glossy": ["shiny", "reflective", "polished", "lustrous"],
        "metallic": ["shimmery", "reflective", "lustrous", "chrome"],
        "holographic": ["iridescent", "rainbow", "shifting", "prismatic"],
        "glittery": ["sparkly", "shimmery", "twinkling", "dazzling"],
        "textured": ["dimensional", "tactile", "varied", "interesting"],
        # Occasion modifiers
        "formal": ["elegant", "sophisticated", "refined", "classy"],
        "casual": ["relaxed", "everyday", "comfortable", "easy"],
        "festive": ["celebratory", "joyful", "party", "special"],
        "romantic": ["loving", "tender", "intimate", "dreamy"],
        "professional": ["polished", "appropriate", "clean", "refined"],
        "artistic": ["creative", "expressive", "unique", "imaginative"],
        # Basic style keywords
        "bridal": ["elegant", "white", "classic", "romantic"],
        "wedding": ["elegant", "formal", "classic", "refined"],
        "neutral": ["beige", "nude", "natural", "understated"],
        "elegant": ["sophisticated", "refined", "classy", "graceful"],
        "simple": ["minimal", "clean", "understated", "basic"],
        "classic": ["timeless", "traditional", "refined", "elegant"],
        "modern": ["contemporary", "sleek", "current", "fresh"],
        "chic": ["stylish", "fashionable", "sophisticated", "trendy"],
    }
)


# =============================================================================
# GENERAL KEYWORDS
# =============================================================================
# Broad categories used only when no concept is found in the prompt.

GENERAL_KEYWORD_MAP = _freeze(
    {
        # Style categories
        "elegant": ["elegant", "classy", "sophisticated", "refined", "graceful", "chic"],
        "edgy": ["edgy", "bold", "dramatic", "fierce", "punk", "rock", "gothic", "dark"],
        "minimalist": ["minimalist", "simple", "clean", "subtle", "understated", "basic"],
        "maximalist": ["maximalist", "3d", "elaborate", "ornate", "detailed", "complex", "busy"],
        "cute": ["cute", "adorable", "sweet", "kawaii", "playful", "fun"],
        "glamorous": ["glamorous", "glam", "sparkly", "glittery", "shiny", "luxurious"],
        # Colour categories
        "neutral": ["neutral", "nude", "beige", "natural", "brown", "tan"],
        "pink": ["pink", "rose", "blush", "coral", "salmon"],
        "red": ["red", "crimson", "burgundy", "wine", "cherry"],
        "black": ["black", "dark", "midnight", "charcoal"],
        "white": ["white", "ivory", "cream", "pearl"],
        "blue": ["blue", "navy", "teal", "turquoise", "aqua"],
        "green": ["green", "mint", "sage", "emerald", "forest"],
        "purple": ["purple", "lavender", "violet", "plum"],
        "gold": ["gold", "golden", "metallic", "bronze"],
        "silver": ["silver", "chrome", "platinum"],
        # Occasion categories
        "wedding": ["wedding", "bridal", "bride", "ceremony", "marriage"],
        "party": ["party", "celebration", "festive", "birthday"],
        "beach": ["beach", "summer", "vacation", "tropical", "ocean"],
        "work": ["work", "office", "professional", "business", "corporate"],
        "date": ["date", "romantic", "dinner", "evening"],
        "casual": ["casual", "everyday", "daily", "relaxed"],
        # Design elements
        "floral": ["floral", "flower", "flowers", "botanical", "garden", "rose", "daisy"],
        "geometric": ["geometric", "lines", "shapes", "triangles", "squares"],
        "french": ["french", "tips", "classic"],
        "ombre": ["ombre", "gradient", "fade", "blend"],
        "marble": ["marble", "marbled", "stone"],
        "glitter": ["glitter", "sparkle", "shimmer", "holographic"],
        "matte": ["matte", "flat", "non-glossy"],
        # Nail shapes
        "coffin": ["coffin", "ballerina"],
        "almond": ["almond", "pointed"],
        "square": ["square", "squared"],
        "round": ["round", "rounded"],
        "oval": ["oval"],
        "stiletto": ["stiletto", "sharp"],
        # Length
        "short": ["short", "small", "tiny"],
        "medium": ["medium", "mid-length"],
        "long": ["long", "extended"],
        # Finish
        "glossy": ["glossy", "shiny", "high-gloss"],
        "chrome": ["chrome", "mirror", "metallic"],
        "holographic": ["holographic", "holo", "rainbow"],
    }
)


def concept_tags(concept: str) -> list[str]:
    """Return the primary tags for a concept phrase (empty if unknown)."""
    return list(CONCEPT_MAP.get(concept.lower(), ()))


def all_known_tags() -> set[str]:
    """Every tag the dictionary can emit."""
    tags: set[str] = set(MODIFIER_MAP) | set(GENERAL_KEYWORD_MAP)
    for values in CONCEPT_MAP.values():
        tags.update(values)
    return tags
