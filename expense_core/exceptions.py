"""Domain-specific exceptions for the expense tracker core."""

from typing import Iterable


class ValidationError(ValueError):
    """Raised when a submitted draft leaves required fields empty."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"{', '.join(self.fields)} cannot be empty")


class PersistenceError(IOError):
    """Base class for failures at the storage boundary."""


class PersistenceReadError(PersistenceError):
    """Raised when stored data is missing its expected shape or cannot be read."""


class PersistenceWriteError(PersistenceError):
    """Raised when the storage backend fails to write a value."""
