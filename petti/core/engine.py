from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from petti.core.errors import NotLoadedError
from petti.core.levels import (
    CRATE,
    CRATE_ON_TARGET,
    PLAYER,
    PLAYER_ON_TARGET,
    TARGET,
    WALL,
    LevelDefinition,
    Position,
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class GridState:
    """Read-only view of the board handed to renderers."""

    player_position: Position
    crate_positions: Tuple[Position, ...]
    walls: FrozenSet[Position]
    targets: FrozenSet[Position]
    width: int
    height: int
    move_count: int
    status: GameStatus
    facing: Direction

    def crates_on_targets(self) -> int:
        return sum(1 for pos in self.crate_positions if pos in self.targets)

    def to_layout(self) -> List[str]:
        """Render the board in the level file alphabet, one string per row."""
        crates = set(self.crate_positions)
        rows = []
        for y in range(self.height):
            chars = []
            for x in range(self.width):
                pos = Position(x, y)
                on_target = pos in self.targets
                if pos in self.walls:
                    chars.append(WALL)
                elif pos == self.player_position:
                    chars.append(PLAYER_ON_TARGET if on_target else PLAYER)
                elif pos in crates:
                    chars.append(CRATE_ON_TARGET if on_target else CRATE)
                elif on_target:
                    chars.append(TARGET)
                else:
                    chars.append(" ")
            rows.append("".join(chars).rstrip())
        return rows


@dataclass(frozen=True)
class MoveOutcome:
    """Result of a single attempt_move call.

    ``status_changed`` is true only on the call that entered WON or LOST,
    so callers can hang one-shot side effects (completion, sounds) on it.
    """

    moved: bool
    pushed_crate: bool
    status: GameStatus
    status_changed: bool = False

    @property
    def blocked(self) -> bool:
        return not self.moved


class PuzzleEngine:
    """Grid state machine for one loaded level.

    Only moves that change the player's cell increment the move counter;
    blocked attempts still turn the player to face the attempted direction.
    With ``enable_deadlock_detection`` the engine enters LOST when a plain
    step leaves the player with no legal move.
    """

    def __init__(self, enable_deadlock_detection: bool = False) -> None:
        self._deadlock_detection = enable_deadlock_detection
        self._level: Optional[LevelDefinition] = None
        self._player = Position(0, 0)
        self._crates: List[Position] = []
        self._move_count = 0
        self._status = GameStatus.IN_PROGRESS
        self._facing = Direction.DOWN

    @property
    def deadlock_detection(self) -> bool:
        return self._deadlock_detection

    @property
    def level(self) -> LevelDefinition:
        return self._require_level()

    def load(self, level: LevelDefinition) -> None:
        self._level = level
        self._restore_start()
        logger.debug("Loaded level %s (%s)", level.id, level.name)

    def reset(self) -> None:
        self._require_level()
        self._restore_start()

    def attempt_move(self, direction: Direction) -> MoveOutcome:
        level = self._require_level()
        if self._status is not GameStatus.IN_PROGRESS:
            return MoveOutcome(moved=False, pushed_crate=False, status=self._status)

        self._facing = direction
        dx, dy = direction.vector
        target = self._player.offset(dx, dy)
        if not self._is_open(level, target):
            return MoveOutcome(moved=False, pushed_crate=False, status=self._status)

        crate_index = self._crate_index_at(target)
        if crate_index is not None:
            beyond = target.offset(dx, dy)
            if not self._is_open(level, beyond) or self._crate_index_at(beyond) is not None:
                return MoveOutcome(moved=False, pushed_crate=False, status=self._status)
            self._crates[crate_index] = beyond
            self._player = target
            self._move_count += 1
            changed = self._evaluate_win(level)
            return MoveOutcome(moved=True, pushed_crate=True, status=self._status, status_changed=changed)

        self._player = target
        self._move_count += 1
        changed = False
        if self._deadlock_detection:
            changed = self._evaluate_stuck(level)
        return MoveOutcome(moved=True, pushed_crate=False, status=self._status, status_changed=changed)

    def has_legal_move(self) -> bool:
        """True if any direction allows a step or a crate push."""
        level = self._require_level()
        for direction in Direction:
            dx, dy = direction.vector
            target = self._player.offset(dx, dy)
            if not self._is_open(level, target):
                continue
            if self._crate_index_at(target) is None:
                return True
            beyond = target.offset(dx, dy)
            if self._is_open(level, beyond) and self._crate_index_at(beyond) is None:
                return True
        return False

    def is_won(self) -> bool:
        self._require_level()
        return self._status is GameStatus.WON

    def is_lost(self) -> bool:
        self._require_level()
        return self._status is GameStatus.LOST

    def move_count(self) -> int:
        self._require_level()
        return self._move_count

    def snapshot(self) -> GridState:
        level = self._require_level()
        return GridState(
            player_position=self._player,
            crate_positions=tuple(self._crates),
            walls=level.walls,
            targets=level.targets,
            width=level.width,
            height=level.height,
            move_count=self._move_count,
            status=self._status,
            facing=self._facing,
        )

    def _require_level(self) -> LevelDefinition:
        if self._level is None:
            raise NotLoadedError("no level loaded")
        return self._level

    def _restore_start(self) -> None:
        level = self._require_level()
        self._player = level.player_start
        self._crates = list(level.crates)
        self._move_count = 0
        self._status = GameStatus.IN_PROGRESS
        self._facing = Direction.DOWN

    def _is_open(self, level: LevelDefinition, pos: Position) -> bool:
        return level.in_bounds(pos) and pos not in level.walls

    def _crate_index_at(self, pos: Position) -> Optional[int]:
        try:
            return self._crates.index(pos)
        except ValueError:
            return None

    def _all_crates_on_targets(self, level: LevelDefinition) -> bool:
        return all(pos in level.targets for pos in self._crates)

    def _evaluate_win(self, level: LevelDefinition) -> bool:
        if self._status is GameStatus.WON or not self._all_crates_on_targets(level):
            return False
        self._status = GameStatus.WON
        logger.info("Level %s solved in %d moves", level.id, self._move_count)
        return True

    def _evaluate_stuck(self, level: LevelDefinition) -> bool:
        if self._all_crates_on_targets(level) or self.has_legal_move():
            return False
        self._status = GameStatus.LOST
        logger.info("Level %s lost: no legal move after %d moves", level.id, self._move_count)
        return True
