"""Route modules for the API."""

from mixnmatch.api.routes import items, pairing, recipes

__all__ = ["items", "pairing", "recipes"]
