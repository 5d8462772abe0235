"""Board painter: walls, targets, crates and the player drawn from a GridState."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from petti.core.engine import GameStatus, GridState
from petti.core.levels import Position
from petti.ui.colors import BoardColors, blend_hex


class BoardWidget(QWidget):
    """Square cells scaled to fit the widget, centered."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._state: Optional[GridState] = None
        self.setMinimumSize(240, 200)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setFocusPolicy(Qt.NoFocus)

    def set_snapshot(self, state: GridState) -> None:
        self._state = state
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(BoardColors.BACKGROUND))
        state = self._state
        if state is None:
            return

        cell = max(8, min(self.width() // state.width, self.height() // state.height))
        origin_x = (self.width() - cell * state.width) // 2
        origin_y = (self.height() - cell * state.height) // 2

        def cell_rect(pos: Position, inset: float = 0.0) -> QRectF:
            return QRectF(
                origin_x + pos.x * cell + inset,
                origin_y + pos.y * cell + inset,
                cell - 2 * inset,
                cell - 2 * inset,
            )

        painter.setPen(QPen(QColor(BoardColors.GRID_LINE), 1))
        painter.setBrush(QColor(BoardColors.FLOOR))
        for y in range(state.height):
            for x in range(state.width):
                painter.drawRect(cell_rect(Position(x, y)))

        painter.setPen(QPen(QColor(BoardColors.WALL_EDGE), 1))
        painter.setBrush(QColor(BoardColors.WALL))
        for pos in state.walls:
            painter.drawRect(cell_rect(pos))

        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(BoardColors.TARGET))
        for pos in state.targets:
            painter.drawEllipse(cell_rect(pos, cell * 0.35))

        radius = cell * 0.12
        painter.setPen(QPen(QColor(BoardColors.CRATE_EDGE), 2))
        for pos in state.crate_positions:
            fill = BoardColors.CRATE_ON_TARGET if pos in state.targets else BoardColors.CRATE
            painter.setBrush(QColor(fill))
            painter.drawRoundedRect(cell_rect(pos, cell * 0.1), radius, radius)

        player_fill = BoardColors.PLAYER
        if state.status is GameStatus.LOST:
            player_fill = blend_hex(BoardColors.PLAYER, BoardColors.LOST, 0.6)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(player_fill))
        body = cell_rect(state.player_position, cell * 0.15)
        painter.drawEllipse(body)

        # eye marks the facing direction
        dx, dy = state.facing.vector
        center = body.center()
        eye = QPointF(center.x() + dx * body.width() * 0.25, center.y() + dy * body.height() * 0.25)
        painter.setBrush(QColor(BoardColors.PLAYER_EYE))
        painter.drawEllipse(eye, body.width() * 0.1, body.height() * 0.1)
