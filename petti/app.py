"""Application entry point and setup for the Petti box-pushing puzzle."""

import logging
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from petti.core.engine import PuzzleEngine
from petti.core.levels import LevelCatalog
from petti.core.progress import ProgressTracker
from petti.core.session import GameSession
from petti.core.storage import JsonFileStore
from petti.ui.main_window import MainWindow

DEADLOCK_DETECTION = True


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_session() -> GameSession:
    """Wire the shipped levels, the on-disk store and the engine into a started session."""
    catalog = LevelCatalog.from_directory()
    tracker = ProgressTracker(catalog, JsonFileStore())
    session = GameSession(catalog, tracker, PuzzleEngine(enable_deadlock_detection=DEADLOCK_DETECTION))
    session.start()
    return session


def run() -> None:
    """Initialize the application, load levels and progress, and show the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Petti")
    app.setApplicationDisplayName("Petti")

    window = MainWindow(build_session())
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(900, geometry.width()), min(700, geometry.height()))
    window.show()

    sys.exit(app.exec())

