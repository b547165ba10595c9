"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.wardrobe import OutfitCandidate, WardrobeItemDescriptor, from_raw_item, from_raw_outfit
from models.weather import CacheEntry, Location, WeatherCondition, WeatherContext

__all__ = [
    "CacheEntry",
    "Location",
    "OutfitCandidate",
    "WardrobeItemDescriptor",
    "WeatherCondition",
    "WeatherContext",
    "from_raw_item",
    "from_raw_outfit",
]
