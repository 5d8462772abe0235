from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Protocol

from petti.core.errors import PersistenceUnavailableError


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Key-value slots kept in a single JSON object on disk.

    File: ~/.petti/store.json unless another path is given. A missing file
    reads as an empty store; anything else that goes wrong is reported as
    PersistenceUnavailableError.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or Path.home() / ".petti" / "store.json"

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise PersistenceUnavailableError(f"{self._file_path}: slot {key!r} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except PersistenceUnavailableError:
            # Overwrite an unreadable file.
            data = {}
        data[key] = value
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceUnavailableError(f"Could not write {self._file_path}: {e}") from e

    def _read(self) -> Dict[str, object]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError, OSError) as e:
            raise PersistenceUnavailableError(f"Could not read {self._file_path}: {e}") from e
        if not isinstance(payload, dict):
            raise PersistenceUnavailableError(f"{self._file_path}: expected a JSON object")
        return payload
