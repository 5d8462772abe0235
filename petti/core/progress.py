from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from petti.core.errors import OutOfRangeError, PersistenceUnavailableError
from petti.core.levels import LevelCatalog, LevelDefinition
from petti.core.storage import KeyValueStore

logger = logging.getLogger(__name__)

PROGRESS_KEY = "sokoban-progress"


@dataclass(frozen=True)
class ProgressState:
    current_level_index: int = 0
    completed_level_indexes: FrozenSet[int] = field(default_factory=frozenset)

    def to_json(self) -> str:
        return json.dumps(
            {
                "currentLevelIndex": self.current_level_index,
                "completedLevelIndexes": sorted(self.completed_level_indexes),
            }
        )

    @classmethod
    def from_json(cls, raw: str, total_levels: int) -> ProgressState:
        """Parse a stored record, raising ValueError on any shape or range problem."""
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise ValueError(f"not JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object")

        index = payload.get("currentLevelIndex", 0)
        if not _is_int(index) or not 0 <= index < total_levels:
            raise ValueError(f"currentLevelIndex {index!r} out of range")

        # older saves used "completedLevels"
        completed = payload.get("completedLevelIndexes", payload.get("completedLevels", []))
        if not isinstance(completed, list):
            raise ValueError("completedLevelIndexes is not a list")
        for item in completed:
            if not _is_int(item) or not 0 <= item < total_levels:
                raise ValueError(f"completed index {item!r} out of range")
        return cls(current_level_index=index, completed_level_indexes=frozenset(completed))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ProgressTracker:
    """Current level and completed levels, saved to a key-value store after every change.

    Store failures are logged and swallowed; the in-memory state stays
    authoritative for the rest of the session.
    """

    def __init__(self, catalog: LevelCatalog, store: KeyValueStore, key: str = PROGRESS_KEY) -> None:
        self._catalog = catalog
        self._store = store
        self._key = key
        self._state = self._load()

    def state(self) -> ProgressState:
        return self._state

    def current_index(self) -> int:
        return self._state.current_level_index

    def current_level(self) -> LevelDefinition:
        return self._catalog.get(self._state.current_level_index)

    def total_levels(self) -> int:
        return len(self._catalog)

    def completed_indexes(self) -> FrozenSet[int]:
        return self._state.completed_level_indexes

    def is_completed(self, index: int) -> bool:
        if not 0 <= index < self.total_levels():
            raise OutOfRangeError(f"level index {index} not in [0, {self.total_levels()})")
        return index in self._state.completed_level_indexes

    def complete_current(self) -> None:
        completed = self._state.completed_level_indexes | {self._state.current_level_index}
        self._update(completed_level_indexes=completed)

    def can_advance(self) -> bool:
        return self.current_index() < self.total_levels() - 1

    def advance(self) -> bool:
        if not self.can_advance():
            return False
        self._update(current_level_index=self.current_index() + 1)
        return True

    def can_retreat(self) -> bool:
        return self.current_index() > 0

    def retreat(self) -> bool:
        if not self.can_retreat():
            return False
        self._update(current_level_index=self.current_index() - 1)
        return True

    def go_to(self, index: int) -> bool:
        if not 0 <= index < self.total_levels():
            return False
        self._update(current_level_index=index)
        return True

    def progress_percentage(self) -> int:
        """Completed share of the catalog, rounded half up."""
        ratio = len(self._state.completed_level_indexes) / self.total_levels()
        return int(math.floor(ratio * 100 + 0.5))

    def reset_progress(self) -> None:
        self._state = ProgressState()
        self._save()

    def _update(
        self,
        current_level_index: Optional[int] = None,
        completed_level_indexes: Optional[FrozenSet[int]] = None,
    ) -> None:
        self._state = ProgressState(
            current_level_index=(
                self._state.current_level_index if current_level_index is None else current_level_index
            ),
            completed_level_indexes=(
                self._state.completed_level_indexes
                if completed_level_indexes is None
                else frozenset(completed_level_indexes)
            ),
        )
        self._save()

    def _load(self) -> ProgressState:
        try:
            raw = self._store.get(self._key)
        except (PersistenceUnavailableError, OSError) as e:
            logger.warning("Could not load progress from %r: %s", self._key, e)
            return ProgressState()
        if raw is None:
            logger.debug("No saved progress under %r", self._key)
            return ProgressState()
        try:
            return ProgressState.from_json(raw, self.total_levels())
        except ValueError as e:
            logger.warning("Ignoring saved progress under %r: %s", self._key, e)
            return ProgressState()

    def _save(self) -> None:
        try:
            self._store.set(self._key, self._state.to_json())
        except (PersistenceUnavailableError, OSError) as e:
            logger.warning("Could not save progress to %r: %s", self._key, e)
