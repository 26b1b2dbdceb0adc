"""Weather-aware pairing of catalog items with a de-duplicated favorites ledger."""

__version__ = "0.1.0"
