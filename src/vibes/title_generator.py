"""
Display titles for matched nail designs.

Builds short, natural-sounding titles ("Glamorous Barbie-inspired
metallic nails") from the user's prompt and the matched concept.
"""

import random
import re
from typing import Optional

DEFAULT_TITLE = "Custom nail design"

CONCEPT_PHRASES = {
    "harry potter": ["Magical witchy", "Enchanted dark", "Mystical Harry Potter-inspired"],
    "barbie": ["Barbie pink glam", "Pretty in pink Barbie", "Glamorous Barbie-inspired"],
    "bridgerton": ["Romantic Bridgerton", "Elegant period drama", "Regency-inspired romantic"],
    "euphoria": ["Bold Euphoria-style", "Sparkly experimental", "Euphoria glam"],
    "twilight": ["Moody vampire", "Dark romantic", "Twilight-inspired mysterious"],
    "coastal grandma": ["Soft coastal", "Natural beachy", "Effortless coastal"],
    "dark academia": ["Scholarly dark", "Moody academic", "Dark academia aesthetic"],
    "cottagecore": ["Whimsical cottage", "Dreamy floral", "Cottagecore romantic"],
    "clean girl": ["Effortless clean", "Natural minimalist", "Clean girl aesthetic"],
    "old money": ["Timeless elegant", "Classic sophisticated", "Old money chic"],
    "mob wife": ["Bold dramatic", "Luxury statement", "Fierce mob wife"],
    "balletcore": ["Delicate ballet", "Soft ballerina", "Ballet-inspired feminine"],
    "mermaidcore": ["Iridescent mermaid", "Ocean-inspired shimmer", "Magical mermaid"],
    "quiet luxury": ["Understated elegant", "Sophisticated minimal", "Quiet luxury chic"],
}

DESCRIPTOR_PHRASES = {
    "matte": ["with a matte finish", "in matte", "matte"],
    "glossy": ["with a glossy shine", "high-gloss", "glossy"],
    "metallic": ["with metallic accents", "metallic", "shimmery metallic"],
    "glitter": ["with sparkly glitter", "glittery", "sparkling"],
    "holographic": ["with holographic shine", "iridescent", "rainbow holographic"],
    "chrome": ["chrome mirror", "reflective chrome", "liquid chrome"],
    "neutral": ["in neutral tones", "neutral", "soft neutral"],
    "bold": ["bold statement", "striking", "dramatic"],
    "cute": ["adorably cute", "sweet", "playfully cute"],
    "elegant": ["elegantly styled", "sophisticated", "refined"],
    "edgy": ["edgy and bold", "fierce", "dramatically edgy"],
    "minimal": ["minimalist", "clean and simple", "understated"],
    "romantic": ["romantically soft", "dreamy romantic", "sweetly romantic"],
    "vintage": ["vintage-inspired", "retro chic", "classic vintage"],
    "modern": ["modern chic", "contemporary", "sleek modern"],
}

COLOR_PHRASES = {
    "red": ["classic red", "bold crimson", "rich red"],
    "pink": ["pretty pink", "soft blush", "vibrant pink"],
    "black": ["sleek black", "dramatic black", "classic black"],
    "white": ["crisp white", "pure white", "elegant white"],
    "blue": ["beautiful blue", "ocean blue", "sky blue"],
    "green": ["fresh green", "sage green", "emerald green"],
    "purple": ["royal purple", "lavender purple", "deep purple"],
    "gold": ["luxe gold", "golden", "metallic gold"],
    "silver": ["shimmery silver", "cool silver", "metallic silver"],
    "nude": ["natural nude", "soft nude", "perfect nude"],
}

FILLER_PHRASES = [
    "make it", "make them", "make the", "make my", "make me",
    "i want", "i need", "i would like", "i'd like",
    "can you", "could you", "please", "thanks",
    "look like", "looks like", "looking like",
    "style", "styled", "design", "designed",
    "nail art", "nail design", "nail polish",
    "something", "anything", "that", "this",
    "with", "and", "but", "or", "the", "a", "an",
    "very", "really", "super", "so", "quite",
    "kind of", "sort of", "type of", "like",
    "give me", "show me", "do", "create",
    "for", "to", "in", "on", "at", "by",
]

_FILLER_PATTERNS = [
    re.compile(rf"\b{re.escape(filler)}\b", re.IGNORECASE) for filler in FILLER_PHRASES
]
_NAIL_WORDS = ("nails", "nail", "design", "art", "polish")
_INTENSIFIERS = re.compile(r"\b(very|really|super|kind of|sort of)\s+")


def clean_prompt(prompt: str) -> str:
    """Lowercase the prompt and strip filler words and punctuation."""
    cleaned = prompt.lower()
    for pattern in _FILLER_PATTERNS:
        cleaned = pattern.sub(" ", cleaned)
    cleaned = re.sub(r"[.,!?;:\"'()\[\]{}]", " ", cleaned)
    return " ".join(cleaned.split())


def extract_natural_descriptors(prompt: str, rng: random.Random) -> list[str]:
    """Turn colour and style words into phrases, plus up to two leftover words."""
    descriptors: list[str] = []
    words = prompt.split()

    for table in (COLOR_PHRASES, DESCRIPTOR_PHRASES):
        for keyword, phrases in table.items():
            if keyword in words or keyword in prompt:
                descriptors.append(rng.choice(phrases))

    meaningful = [
        word
        for word in words
        if len(word) > 2
        and word not in COLOR_PHRASES
        and word not in DESCRIPTOR_PHRASES
        and word not in _NAIL_WORDS
    ]
    for word in meaningful[:2]:
        if not any(word in descriptor for descriptor in descriptors):
            descriptors.append(word)

    return descriptors[:3]


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def generate_title(
    prompt, matched_concept: Optional[str] = None, rng: Optional[random.Random] = None
) -> str:
    """
    Generate a display title for a nail design.

    Args:
        prompt: The user's original prompt
        matched_concept: Concept found during tag extraction, if any
        rng: Random source for picking between phrasings

    Returns:
        A short title ending in "nails", or DEFAULT_TITLE
    """
    if not isinstance(prompt, str) or not prompt.strip():
        return DEFAULT_TITLE

    rng = rng or random.Random()
    lower_prompt = prompt.lower().strip()

    # Concept-based titles
    if matched_concept and matched_concept in CONCEPT_PHRASES:
        phrase = rng.choice(CONCEPT_PHRASES[matched_concept])
        remaining = clean_prompt(lower_prompt.replace(matched_concept.lower(), "", 1))
        descriptors = extract_natural_descriptors(remaining, rng)
        if descriptors:
            return f"{phrase} {descriptors[0]} nails"
        return f"{phrase} nails"

    cleaned = clean_prompt(lower_prompt)
    descriptors = extract_natural_descriptors(cleaned, rng)
    if descriptors:
        return _capitalize_first(" ".join(descriptors[:2]) + " nails")

    # Fall back to the cleaned prompt itself
    if len(cleaned) > 2:
        title = cleaned if "nail" in cleaned else f"{cleaned} nails"
        title = re.sub(r"\bnails nails\b", "nails", title)
        title = _INTENSIFIERS.sub("", title)
        return _capitalize_first(" ".join(title.split()))

    return DEFAULT_TITLE
