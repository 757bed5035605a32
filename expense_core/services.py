"""Framework-agnostic expense store: collection, edit session and persistence."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple, Union

from .exceptions import PersistenceReadError, PersistenceWriteError
from .models import ExpenseRecord, FormDraft, decode_collection, encode_collection
from .storage import KeyValueStorage
from .validators import validate_draft

logger = logging.getLogger(__name__)

STORAGE_KEY = "expenses"

Listener = Callable[["ExpenseStore"], None]
DraftInput = Union[FormDraft, Mapping[str, Any]]


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class ExpenseStore:
    """Owns the ordered expense collection, the edit session and the form draft.

    The collection is kept newest-first. Every successful mutation re-persists
    the whole collection; write failures are logged and the in-memory state
    stays authoritative for the running session.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock or _epoch_millis
        self._expenses: List[ExpenseRecord] = []
        self._editing_id: Optional[int] = None
        self._draft = FormDraft()
        self._last_issued_id = 0
        self._listeners: List[Listener] = []

    # Read accessors -------------------------------------------------------
    @property
    def expenses(self) -> Tuple[ExpenseRecord, ...]:
        return tuple(self._expenses)

    @property
    def editing_id(self) -> Optional[int]:
        return self._editing_id

    @property
    def is_editing(self) -> bool:
        return self._editing_id is not None

    @property
    def draft(self) -> FormDraft:
        return self._draft

    def get(self, expense_id: int) -> Optional[ExpenseRecord]:
        index = self._index_of(expense_id)
        return None if index is None else self._expenses[index]

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(tuple(self._expenses))

    # Persistence ----------------------------------------------------------
    def load(self) -> int:
        """Replace the collection with the persisted one; start empty on any failure."""
        try:
            raw = self._storage.read(self._key)
            records = decode_collection(raw) if raw else []
        except PersistenceReadError:
            logger.exception("Failed to load expenses from storage key '%s'", self._key)
            records = []

        self._expenses = records
        self._editing_id = None
        self._draft.clear()
        logger.debug("Loaded %d expense(s)", len(records))
        self._notify()
        return len(records)

    def save(self) -> bool:
        """Write the full collection to storage. Returns False if the write failed."""
        try:
            self._storage.write(self._key, encode_collection(self._expenses))
        except PersistenceWriteError:
            logger.exception("Failed to save expenses to storage key '%s'", self._key)
            return False
        return True

    # Edit session ---------------------------------------------------------
    def begin_edit(self, expense_id: int) -> Optional[ExpenseRecord]:
        record = self.get(expense_id)
        if record is None:
            return None
        self._editing_id = record.id
        self._draft.update(amount=record.amount, date=record.date, note=record.note)
        self._notify()
        return record

    def cancel_edit(self) -> None:
        self._reset_session()
        self._notify()

    def update_draft(self, **fields: Any) -> FormDraft:
        self._draft.update(**fields)
        return self._draft

    # Mutations ------------------------------------------------------------
    def submit(self, draft: Optional[DraftInput] = None) -> Optional[ExpenseRecord]:
        """Create a record in add-mode or update the edited one in edit-mode.

        Raises ValidationError, leaving the collection and session untouched,
        when any of amount, date or note is empty.
        """
        if draft is not None:
            staged = draft if isinstance(draft, FormDraft) else FormDraft.from_mapping(draft)
            self._draft.update(**staged.to_dict())
        validate_draft(self._draft)

        if self._editing_id is None:
            result: Optional[ExpenseRecord] = ExpenseRecord(
                id=self._next_id(), **self._draft.to_dict()
            )
            self._expenses.insert(0, result)
            logger.debug("Added expense %s", result.id)
        else:
            result = self._replace_fields(self._editing_id)

        self.save()
        self._reset_session()
        self._notify()
        return result

    def delete(self, expense_id: int) -> bool:
        """Remove a record. Confirmation is the caller's responsibility."""
        index = self._index_of(expense_id)
        if index is None:
            return False
        del self._expenses[index]
        logger.debug("Deleted expense %s", expense_id)
        self.save()
        if self._editing_id == expense_id:
            self._reset_session()
        self._notify()
        return True

    # Observers ------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after each state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Internal helpers -----------------------------------------------------
    def _replace_fields(self, expense_id: int) -> Optional[ExpenseRecord]:
        index = self._index_of(expense_id)
        if index is None:
            logger.warning("Expense %s disappeared while being edited; nothing updated", expense_id)
            return None
        updated = replace(self._expenses[index], **self._draft.to_dict())
        self._expenses[index] = updated
        logger.debug("Updated expense %s", expense_id)
        return updated

    def _next_id(self) -> int:
        # Millisecond timestamps, bumped past anything already issued or stored.
        candidate = max(self._clock(), self._last_issued_id + 1)
        taken = {record.id for record in self._expenses}
        while candidate in taken:
            candidate += 1
        self._last_issued_id = candidate
        return candidate

    def _index_of(self, expense_id: int) -> Optional[int]:
        for index, record in enumerate(self._expenses):
            if record.id == expense_id:
                return index
        return None

    def _reset_session(self) -> None:
        self._editing_id = None
        self._draft.clear()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
