from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

import yaml

from petti.core.errors import OutOfRangeError

WALL = "#"
PLAYER = "@"
PLAYER_ON_TARGET = "+"
CRATE = "$"
CRATE_ON_TARGET = "*"
TARGET = "."
FLOOR_CHARS = " -_"


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Position:
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class LevelDefinition:
    """A single authored puzzle. Crate order is kept so a reset can restore crate i to crates[i]."""

    id: int
    name: str
    width: int
    height: int
    player_start: Position
    crates: Tuple[Position, ...]
    targets: FrozenSet[Position]
    walls: FrozenSet[Position]

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def validate(self) -> None:
        """Raise ValueError if the level cannot be played as authored."""
        if self.id <= 0:
            raise ValueError(f"level id must be positive, got {self.id}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"level {self.id}: size must be positive, got {self.width}x{self.height}")
        if not self.crates:
            raise ValueError(f"level {self.id}: needs at least one crate")
        if len(set(self.crates)) != len(self.crates):
            raise ValueError(f"level {self.id}: two crates share a cell")
        if len(self.crates) != len(self.targets):
            raise ValueError(
                f"level {self.id}: {len(self.crates)} crates but {len(self.targets)} targets"
            )
        for pos in (self.player_start, *self.crates, *self.targets, *self.walls):
            if not self.in_bounds(pos):
                raise ValueError(f"level {self.id}: ({pos.x}, {pos.y}) is outside the grid")
        if self.player_start in self.walls:
            raise ValueError(f"level {self.id}: player starts inside a wall")
        if self.player_start in self.crates:
            raise ValueError(f"level {self.id}: player starts on a crate")
        if self.walls.intersection(self.crates):
            raise ValueError(f"level {self.id}: a crate sits inside a wall")


def parse_layout(level_id: int, name: str, layout: str) -> LevelDefinition:
    """Build a level from the usual Sokoban text alphabet.

    ``#`` wall, ``@`` player, ``+`` player on target, ``$`` crate,
    ``*`` crate on target, ``.`` target and space, ``-`` or ``_`` floor.
    Crates are numbered in reading order.
    """
    rows = [line.rstrip() for line in layout.splitlines()]
    while rows and not rows[0].strip():
        rows.pop(0)
    while rows and not rows[-1].strip():
        rows.pop()
    if not rows:
        raise ValueError(f"level {level_id}: layout is empty")

    player: Optional[Position] = None
    crates: List[Position] = []
    targets = set()
    walls = set()
    for y, row in enumerate(rows):
        for x, char in enumerate(row):
            pos = Position(x, y)
            if char == WALL:
                walls.add(pos)
            elif char in (PLAYER, PLAYER_ON_TARGET):
                if player is not None:
                    raise ValueError(f"level {level_id}: more than one player in layout")
                player = pos
                if char == PLAYER_ON_TARGET:
                    targets.add(pos)
            elif char in (CRATE, CRATE_ON_TARGET):
                crates.append(pos)
                if char == CRATE_ON_TARGET:
                    targets.add(pos)
            elif char == TARGET:
                targets.add(pos)
            elif char not in FLOOR_CHARS:
                raise ValueError(f"level {level_id}: unknown layout character {char!r} at ({x}, {y})")
    if player is None:
        raise ValueError(f"level {level_id}: layout has no player")

    level = LevelDefinition(
        id=level_id,
        name=name,
        width=max(len(row) for row in rows),
        height=len(rows),
        player_start=player,
        crates=tuple(crates),
        targets=frozenset(targets),
        walls=frozenset(walls),
    )
    level.validate()
    return level


class LevelCatalog:
    """Ordered, read-only collection of levels."""

    def __init__(self, levels: Iterable[LevelDefinition]) -> None:
        self._levels: Tuple[LevelDefinition, ...] = tuple(levels)
        if not self._levels:
            raise ValueError("a level catalog needs at least one level")
        seen: Dict[int, str] = {}
        for level in self._levels:
            level.validate()
            if level.id in seen:
                raise ValueError(f"duplicate level id {level.id} ({seen[level.id]!r} and {level.name!r})")
            seen[level.id] = level.name

    @classmethod
    def from_directory(cls, base_dir: Optional[Path] = None) -> LevelCatalog:
        if base_dir is None:
            base_dir = Path(__file__).resolve().parent.parent / "data" / "levels"
        if not base_dir.exists():
            raise FileNotFoundError(f"Levels directory not found: {base_dir}")

        def _sort_key(p: Path) -> tuple[int, str]:
            m = re.match(r"^level(\d+)$", p.stem)
            if m:
                return (int(m.group(1)), p.stem)
            return (10**9, p.stem)

        levels: List[LevelDefinition] = []
        for level_path in sorted(base_dir.glob("level*.yaml"), key=_sort_key):
            levels.append(_read_level_file(level_path))

        if not levels:
            raise ValueError(f"No level files (level*.yaml) found in {base_dir}")
        return cls(levels)

    def __len__(self) -> int:
        return len(self._levels)

    def length(self) -> int:
        return len(self._levels)

    def all(self) -> List[LevelDefinition]:
        return list(self._levels)

    def get(self, index: int) -> LevelDefinition:
        if not 0 <= index < len(self._levels):
            raise OutOfRangeError(f"level index {index} not in [0, {len(self._levels)})")
        return self._levels[index]

    def index_of(self, level_id: int) -> int:
        for index, level in enumerate(self._levels):
            if level.id == level_id:
                return index
        raise OutOfRangeError(f"no level with id {level_id}")


def _read_level_file(level_path: Path) -> LevelDefinition:
    try:
        raw = yaml.safe_load(level_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{level_path.name}: invalid YAML: {e}") from e
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{level_path.name}: expected YAML with 'id', 'name' and 'layout'")
    level_id = raw.get("id")
    name = raw.get("name")
    layout = raw.get("layout")
    if not isinstance(level_id, int) or isinstance(level_id, bool):
        raise ValueError(f"{level_path.name}: missing or invalid 'id'")
    if not name or not isinstance(name, str):
        raise ValueError(f"{level_path.name}: missing or invalid 'name'")
    if not layout or not isinstance(layout, str):
        raise ValueError(f"{level_path.name}: missing 'layout'")
    try:
        return parse_layout(level_id, name.strip(), layout)
    except ValueError as e:
        raise ValueError(f"{level_path.name}: {e}") from e
