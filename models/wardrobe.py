"""Wardrobe descriptors and outfit candidates used for weather scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import normalize_category, normalize_tags


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@dataclass
class WardrobeItemDescriptor:
    """The subset of a wardrobe item that matters for weather scoring."""

    category: str
    tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.category = normalize_category(str(self.category))
        self.tags = normalize_tags(_ensure_list(self.tags))

    def has_any(self, *markers: str) -> bool:
        return any(marker in self.tags for marker in markers)


@dataclass
class OutfitCandidate:
    """A candidate outfit; item order is display order only."""

    id: str
    items: List[WardrobeItemDescriptor] = field(default_factory=list)


def from_raw_item(raw: Any) -> Optional[WardrobeItemDescriptor]:
    """Build a descriptor from loose item metadata, or ``None`` if unusable."""

    if isinstance(raw, WardrobeItemDescriptor):
        return raw
    if not isinstance(raw, dict):
        return None
    category = raw.get("category")
    if not isinstance(category, str) or not category.strip():
        return None
    tags = raw.get("tags")
    if tags is not None and not isinstance(tags, (list, tuple, set, frozenset, str)):
        return None
    return WardrobeItemDescriptor(category=category, tags=_ensure_list(tags))


def from_raw_outfit(raw: Dict[str, Any]) -> OutfitCandidate:
    """Factory to build an :class:`OutfitCandidate` from a loose payload.

    Items that cannot be interpreted are dropped rather than failing the
    whole outfit.
    """

    if not raw.get("id"):
        raise ValueError("Missing required field for OutfitCandidate: id")
    items = [item for item in (from_raw_item(entry) for entry in _ensure_list(raw.get("items"))) if item]
    return OutfitCandidate(id=str(raw["id"]), items=items)


__all__ = ["WardrobeItemDescriptor", "OutfitCandidate", "from_raw_item", "from_raw_outfit"]
