"""Catalog data model and taxonomies."""

from .models import Item, Pair
from .taxonomy import (
    COLD_THRESHOLD_CELSIUS,
    PANTRY,
    WARDROBE,
    Category,
    Climate,
    Taxonomy,
    TemperatureRule,
    get_taxonomy,
)

__all__ = [
    "COLD_THRESHOLD_CELSIUS",
    "PANTRY",
    "WARDROBE",
    "Category",
    "Climate",
    "Item",
    "Pair",
    "Taxonomy",
    "TemperatureRule",
    "get_taxonomy",
]
