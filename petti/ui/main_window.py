from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from petti.core.engine import GameStatus
from petti.core.session import GameSession
from petti.ui.board_widget import BoardWidget
from petti.ui.colors import BoardColors
from petti.ui.keys import KEY_NEXT, KEY_PREVIOUS, KEY_RESTART, direction_for_key
from petti.ui.models import build_level_states

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Single-screen window: header with level and progress, the board, and navigation buttons.

    Arrow keys or WASD move, R restarts, N and P switch levels.
    """

    def __init__(self, session: GameSession) -> None:
        super().__init__()
        self._session = session
        self._refreshing_selector = False

        self._title_label: Optional[QLabel] = None
        self._moves_label: Optional[QLabel] = None
        self._progress_label: Optional[QLabel] = None
        self._status_label: Optional[QLabel] = None
        self._level_selector: Optional[QComboBox] = None
        self._prev_button: Optional[QPushButton] = None
        self._next_button: Optional[QPushButton] = None
        self._board: Optional[BoardWidget] = None

        self.setWindowTitle("Petti")
        self._build_ui()
        self._refresh()

    def _build_ui(self) -> None:
        root = QWidget()
        root.setStyleSheet(f"background: {BoardColors.BACKGROUND}; color: {BoardColors.TEXT_PRIMARY};")
        layout = QVBoxLayout(root)

        header = QHBoxLayout()
        self._title_label = QLabel()
        self._title_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        self._moves_label = QLabel()
        self._progress_label = QLabel()
        self._progress_label.setStyleSheet(f"color: {BoardColors.TEXT_MUTED};")
        header.addWidget(self._title_label)
        header.addStretch(1)
        header.addWidget(self._moves_label)
        header.addSpacing(16)
        header.addWidget(self._progress_label)
        layout.addLayout(header)

        self._status_label = QLabel()
        self._status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._status_label)

        self._board = BoardWidget()
        layout.addWidget(self._board, 1)

        controls = QHBoxLayout()
        self._prev_button = QPushButton("◀ Previous")
        self._prev_button.clicked.connect(self._previous_level)
        restart_button = QPushButton("Restart (R)")
        restart_button.clicked.connect(self._restart)
        self._next_button = QPushButton("Next ▶")
        self._next_button.clicked.connect(self._next_level)
        self._level_selector = QComboBox()
        self._level_selector.currentIndexChanged.connect(self._select_level)
        reset_progress_button = QPushButton("Reset progress")
        reset_progress_button.clicked.connect(self._reset_progress)
        for widget in (self._prev_button, restart_button, self._next_button, self._level_selector):
            widget.setFocusPolicy(Qt.NoFocus)
            controls.addWidget(widget)
        controls.addStretch(1)
        reset_progress_button.setFocusPolicy(Qt.NoFocus)
        controls.addWidget(reset_progress_button)
        layout.addLayout(controls)

        self.setCentralWidget(root)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = event.key()
        direction = direction_for_key(key)
        if direction is not None:
            outcome = self._session.move(direction)
            if outcome.status_changed:
                self._refresh_selector()
            self._refresh_board()
        elif key == KEY_RESTART:
            self._restart()
        elif key == KEY_NEXT:
            self._next_level()
        elif key == KEY_PREVIOUS:
            self._previous_level()
        else:
            super().keyPressEvent(event)

    def _restart(self) -> None:
        self._session.restart()
        self._refresh_board()

    def _next_level(self) -> None:
        if self._session.next_level():
            self._refresh()

    def _previous_level(self) -> None:
        if self._session.previous_level():
            self._refresh()

    def _select_level(self, index: int) -> None:
        if self._refreshing_selector or index < 0:
            return
        if self._session.go_to(index):
            self._refresh()

    def _reset_progress(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset progress",
            "Forget all completed levels and return to level 1?",
        )
        if answer != QMessageBox.Yes:
            return
        self._session.tracker.reset_progress()
        self._session.go_to(0)
        logger.info("Progress reset")
        self._refresh()

    def _refresh(self) -> None:
        self._refresh_selector()
        self._refresh_board()

    def _refresh_selector(self) -> None:
        tracker = self._session.tracker
        self._refreshing_selector = True
        try:
            self._level_selector.clear()
            for i, state in enumerate(build_level_states(self._session.catalog, tracker)):
                self._level_selector.addItem(state.label(i))
            self._level_selector.setCurrentIndex(tracker.current_index())
        finally:
            self._refreshing_selector = False
        self._prev_button.setEnabled(tracker.can_retreat())
        self._next_button.setEnabled(tracker.can_advance())
        self._progress_label.setText(f"Progress: {tracker.progress_percentage()}%")

    def _refresh_board(self) -> None:
        tracker = self._session.tracker
        state = self._session.snapshot()
        level = self._session.level
        self._title_label.setText(f"Level {tracker.current_index() + 1}/{tracker.total_levels()}: {level.name}")
        self._moves_label.setText(f"Moves: {state.move_count}")
        if state.status is GameStatus.WON:
            hint = "Press N for the next level." if tracker.can_advance() else "All levels done!"
            self._status_label.setText(f"Level complete in {state.move_count} moves. {hint}")
            self._status_label.setStyleSheet(f"color: {BoardColors.WON}; font-weight: bold;")
        elif state.status is GameStatus.LOST:
            self._status_label.setText("No moves left. Press R to try again.")
            self._status_label.setStyleSheet(f"color: {BoardColors.LOST}; font-weight: bold;")
        else:
            self._status_label.setText(
                f"Crates on targets: {state.crates_on_targets()}/{len(state.crate_positions)}"
            )
            self._status_label.setStyleSheet(f"color: {BoardColors.TEXT_MUTED};")
        self._board.set_snapshot(state)
