"""Persistence for the catalog and favorites slots."""

from .catalog import CATALOG_SLOT, CatalogStore, SubcategoryGroup
from .repository import SCHEMA_VERSION, SharedStore, SlotDocument, load_records

__all__ = [
    "CATALOG_SLOT",
    "SCHEMA_VERSION",
    "CatalogStore",
    "SharedStore",
    "SlotDocument",
    "SubcategoryGroup",
    "load_records",
]
