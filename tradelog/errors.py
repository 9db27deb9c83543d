"""Exceptions raised by tradelog."""

from typing import Optional


class TradelogError(Exception):
    """Base class for all tradelog errors."""


class ConfigError(TradelogError):
    """Configuration file could not be read or parsed."""


class ValidationError(TradelogError):
    """User input was rejected at the ingestion boundary.

    Attributes:
        row: 1-based data row number for CSV imports, None for forms.
    """

    def __init__(self, message: str, row: Optional[int] = None):
        self.row = row
        if row is not None:
            message = f"Row {row}: {message}"
        super().__init__(message)


class StoreError(TradelogError):
    """The journal database failed to read or write."""


class EntryNotFoundError(TradelogError):
    """No trading entry exists for the requested id or date."""


class DuplicateEntryError(TradelogError):
    """An entry already exists for the date being created.

    Attributes:
        existing: The entry already stored for that date.
    """

    def __init__(self, existing):
        self.existing = existing
        super().__init__(f"An entry for {existing.date.isoformat()} already exists")
