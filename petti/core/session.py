from __future__ import annotations

import logging
from typing import Optional

from petti.core.engine import Direction, GameStatus, GridState, MoveOutcome, PuzzleEngine
from petti.core.errors import NotLoadedError
from petti.core.levels import LevelCatalog, LevelDefinition
from petti.core.progress import ProgressTracker

logger = logging.getLogger(__name__)


class GameSession:
    """Drives the engine from the tracker's current level.

    Marks the level complete on the move that solves it, then leaves
    advancing to the caller.
    """

    def __init__(
        self,
        catalog: LevelCatalog,
        tracker: ProgressTracker,
        engine: Optional[PuzzleEngine] = None,
    ) -> None:
        self._catalog = catalog
        self._tracker = tracker
        self._engine = engine or PuzzleEngine()
        self._started = False

    @property
    def catalog(self) -> LevelCatalog:
        return self._catalog

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    @property
    def engine(self) -> PuzzleEngine:
        return self._engine

    @property
    def level(self) -> LevelDefinition:
        self._require_started()
        return self._engine.level

    def start(self) -> None:
        self._load_current()
        self._started = True

    def move(self, direction: Direction) -> MoveOutcome:
        self._require_started()
        outcome = self._engine.attempt_move(direction)
        if outcome.status_changed and outcome.status is GameStatus.WON:
            self._tracker.complete_current()
            logger.info(
                "Completed level %d/%d in %d moves (%d%% done)",
                self._tracker.current_index() + 1,
                self._tracker.total_levels(),
                self._engine.move_count(),
                self._tracker.progress_percentage(),
            )
        return outcome

    def restart(self) -> None:
        self._require_started()
        self._engine.reset()

    def next_level(self) -> bool:
        return self._navigate(self._tracker.advance())

    def previous_level(self) -> bool:
        return self._navigate(self._tracker.retreat())

    def go_to(self, index: int) -> bool:
        return self._navigate(self._tracker.go_to(index))

    def snapshot(self) -> GridState:
        self._require_started()
        return self._engine.snapshot()

    def is_current_completed(self) -> bool:
        return self._tracker.is_completed(self._tracker.current_index())

    def _navigate(self, changed: bool) -> bool:
        if changed:
            self._load_current()
            self._started = True
        return changed

    def _load_current(self) -> None:
        level = self._tracker.current_level()
        self._engine.load(level)
        logger.info(
            "Playing level %d/%d: %s",
            self._tracker.current_index() + 1,
            self._tracker.total_levels(),
            level.name,
        )

    def _require_started(self) -> None:
        if not self._started:
            raise NotLoadedError("session not started")
