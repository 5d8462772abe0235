"""Keyboard bindings for the board."""

from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import Qt

from petti.core.engine import Direction

KEY_DIRECTIONS: Dict[int, Direction] = {
    Qt.Key_Up: Direction.UP,
    Qt.Key_W: Direction.UP,
    Qt.Key_Down: Direction.DOWN,
    Qt.Key_S: Direction.DOWN,
    Qt.Key_Left: Direction.LEFT,
    Qt.Key_A: Direction.LEFT,
    Qt.Key_Right: Direction.RIGHT,
    Qt.Key_D: Direction.RIGHT,
}

KEY_RESTART = Qt.Key_R
KEY_NEXT = Qt.Key_N
KEY_PREVIOUS = Qt.Key_P


def direction_for_key(key: int) -> Optional[Direction]:
    return KEY_DIRECTIONS.get(key)
