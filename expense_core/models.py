"""Data models for the expense tracker domain."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .exceptions import PersistenceReadError

__all__ = [
    "DRAFT_FIELDS",
    "ExpenseRecord",
    "FormDraft",
    "decode_collection",
    "encode_collection",
]

DRAFT_FIELDS = ("amount", "date", "note")

# Largest integer a browser JSON number holds exactly.
MAX_SAFE_ID = 2**53 - 1


@dataclass(frozen=True)
class ExpenseRecord:
    id: int
    amount: str
    date: str
    note: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the record to the persisted object layout."""
        return {
            "id": self.id,
            "amount": self.amount,
            "date": self.date,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExpenseRecord":
        """Hydrate a record from JSON-native data, rejecting unexpected shapes."""
        if not isinstance(data, Mapping):
            raise PersistenceReadError("Expense entries must be JSON objects")
        record_id = data.get("id")
        # bool is an int subclass but never a valid id.
        if not isinstance(record_id, int) or isinstance(record_id, bool):
            raise PersistenceReadError(f"Expense id must be an integer, got {record_id!r}")
        if abs(record_id) > MAX_SAFE_ID:
            raise PersistenceReadError("Expense id is outside the safe integer range")
        values = {}
        for name in DRAFT_FIELDS:
            value = data.get(name)
            if not isinstance(value, str):
                raise PersistenceReadError(
                    f"Expense {record_id} field '{name}' must be a string"
                )
            values[name] = value
        return cls(id=record_id, **values)


@dataclass
class FormDraft:
    """Field values staged in the form, not yet committed to the collection."""

    amount: str = ""
    date: str = ""
    note: str = ""

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "FormDraft":
        return cls(amount=record.amount, date=record.date, note=record.note)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FormDraft":
        values = {name: _field_text(data.get(name)) for name in DRAFT_FIELDS}
        return cls(**values)

    def update(self, **fields: Any) -> None:
        unknown = set(fields) - set(DRAFT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown draft field(s): {', '.join(sorted(unknown))}")
        for name, value in fields.items():
            setattr(self, name, _field_text(value))

    def clear(self) -> None:
        self.amount = ""
        self.date = ""
        self.note = ""

    def is_empty(self) -> bool:
        return not (self.amount or self.date or self.note)

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in DRAFT_FIELDS}


def _field_text(value: Optional[object]) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def encode_collection(records: Iterable[ExpenseRecord]) -> str:
    """Serialise records, in order, to a JSON array of objects."""
    return json.dumps([record.to_dict() for record in records])


def decode_collection(raw: str) -> List[ExpenseRecord]:
    """Parse a stored JSON array back into records, preserving order."""
    try:
        payload = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        # JSONDecodeError is a ValueError; so are over-long integer literals.
        raise PersistenceReadError("Stored expenses are not valid JSON") from exc

    if not isinstance(payload, list):
        raise PersistenceReadError("Expected a JSON array of expenses")

    records = [ExpenseRecord.from_dict(entry) for entry in payload]
    seen = set()
    for record in records:
        if record.id in seen:
            raise PersistenceReadError(f"Duplicate expense id {record.id}")
        seen.add(record.id)
    return records
