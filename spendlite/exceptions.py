"""Domain-specific exceptions for the Spendlite ledger core."""

from typing import Iterable, Tuple


class ValidationError(ValueError):
    """Raised when a transaction or filter does not pass the shape checks."""


class MissingColumnsError(ValidationError):
    """Raised when an imported CSV header lacks one of the required columns."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing: Tuple[str, ...] = tuple(missing)
        super().__init__(f"CSV header is missing required columns: {', '.join(self.missing)}")


class RecordNotFoundError(LookupError):
    """Raised when a transaction cannot be located by id."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
