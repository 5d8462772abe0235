"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from petti.core.levels import LevelCatalog, LevelDefinition
from petti.core.progress import ProgressTracker


@dataclass
class LevelState:
    """UI state for a single entry of the level selector."""

    level: LevelDefinition
    completed: bool
    is_current: bool = False

    def label(self, index: int) -> str:
        mark = "✓ " if self.completed else ""
        return f"{mark}{index + 1}. {self.level.name}"


def build_level_states(catalog: LevelCatalog, tracker: ProgressTracker) -> List[LevelState]:
    current = tracker.current_index()
    return [
        LevelState(level=level, completed=tracker.is_completed(i), is_current=i == current)
        for i, level in enumerate(catalog.all())
    ]
