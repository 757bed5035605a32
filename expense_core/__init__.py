"""Core state and persistence package for the expense tracker."""

from .models import ExpenseRecord, FormDraft
from .services import STORAGE_KEY, ExpenseStore
from .storage import JSONFileStorage, KeyValueStorage, MemoryStorage
from .exceptions import (
    PersistenceError,
    PersistenceReadError,
    PersistenceWriteError,
    ValidationError,
)

__all__ = [
    "ExpenseRecord",
    "FormDraft",
    "ExpenseStore",
    "STORAGE_KEY",
    "JSONFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PersistenceError",
    "PersistenceReadError",
    "PersistenceWriteError",
    "ValidationError",
]
