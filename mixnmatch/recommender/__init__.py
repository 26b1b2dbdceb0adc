"""Eligibility filtering, cursor navigation and the favorites ledger."""

from .cursor import SelectionCursor, advance, clamp, retreat
from .favorites import FAVORITES_SLOT, FavoritesLedger, missing_selection_message
from .rules_engine import Candidates, DisplayMode, EligibilityFilter, filter_candidates

__all__ = [
    "FAVORITES_SLOT",
    "Candidates",
    "DisplayMode",
    "EligibilityFilter",
    "FavoritesLedger",
    "SelectionCursor",
    "advance",
    "clamp",
    "filter_candidates",
    "missing_selection_message",
    "retreat",
]
