"""Canonical taxonomy for wardrobe categories and descriptive tags.

Categories are informational context for weather scoring; tags carry most of
the signal. Both are normalised here so the scorer can compare plain
lower-case strings.
"""

from typing import Dict, Iterable, List

CATEGORIES: List[str] = [
    "tops",
    "bottoms",
    "outerwear",
    "shoes",
    "accessories",
    "dresses",
    "knitwear",
    "activewear",
    "underwear",
]

CATEGORY_ALIASES: Dict[str, str] = {
    "top": "tops",
    "shirt": "tops",
    "bottom": "bottoms",
    "pants": "bottoms",
    "coat": "outerwear",
    "jacket": "outerwear",
    "shoe": "shoes",
    "footwear": "shoes",
    "accessory": "accessories",
    "dress": "dresses",
    "knit": "knitwear",
    "sweater": "knitwear",
}


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a hyphenated lower-case key."""

    return "-".join(value.strip().lower().replace("_", " ").split())


def normalize_category(value: str) -> str:
    """Map a raw category onto the canonical plural form.

    Unknown categories pass through normalised; the list is extensible and a
    category nobody has a rule for simply never matches one.
    """

    key = _normalize_key(value)
    return CATEGORY_ALIASES.get(key, key)


def normalize_tags(values: Iterable[object]) -> List[str]:
    """Normalise and deduplicate free-text tags, keeping first-seen order."""

    normalised = []
    seen = set()
    for value in values:
        if value is None:
            continue
        key = _normalize_key(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "CATEGORIES",
    "CATEGORY_ALIASES",
    "normalize_category",
    "normalize_tags",
]
