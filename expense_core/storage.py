"""Key/value persistence backends for the expense tracker core."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional

from .exceptions import PersistenceReadError, PersistenceWriteError

KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


class KeyValueStorage(ABC):
    """Read/write boundary to durable local storage, addressed by key."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Return the value stored under ``key``, or None if it was never written.

        Raises:
            PersistenceReadError: If the backend cannot be read.
        """

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            PersistenceWriteError: If the value could not be written.
        """


class JSONFileStorage(KeyValueStorage):
    """File-based storage holding one JSON document per key, with crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceReadError(f"Unable to read from {path}") from exc

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
            # Atomic on POSIX; readers see the old or the new document, never half of one.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceWriteError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _path_for(self, key: str) -> Path:
        if not KEY_PATTERN.fullmatch(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base_path / f"{key}.json"


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._values
