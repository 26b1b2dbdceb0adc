"""Exception hierarchy shared across the engine, storage and gateways."""

from __future__ import annotations

from enum import Enum


class MixnMatchError(RuntimeError):
    """Base class for recoverable engine errors."""


class MissingPart(str, Enum):
    """Which side of a pair was absent when committing."""

    BOTH = "both"
    OUTER = "outer"
    INNER = "inner"


class MissingSelectionError(MixnMatchError):
    """Raised when a pair is committed without both an outer and inner item."""

    def __init__(self, missing: MissingPart, message: str | None = None) -> None:
        self.missing = missing
        super().__init__(message or f"Missing selection: {missing.value}")


class WeatherUnavailableError(MixnMatchError):
    """Raised when the weather provider cannot produce a reading."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RecipeUnavailableError(MixnMatchError):
    """Raised when the recipe provider fails or returns an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class PersistenceError(MixnMatchError):
    """Raised when a slot cannot be written to the shared store."""


class DecodeFailure(MixnMatchError):
    """Raised internally when a stored document cannot be decoded."""


class ItemNotFoundError(KeyError):
    """Raised when a catalog id does not exist."""


class TaxonomyError(ValueError):
    """Raised when an item does not fit the configured taxonomy."""
