import logging
import os
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QFont
from PySide6.QtWidgets import (
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from parsers.grid_parser import GridLoadError
from services.debug import DebugOverlay
from services.file_loader import FILE_EXTENSION, FileLoaderService, GridSaveError
from services.game_session import GameSession, SessionEvent, format_seconds
from ui.message_dialog import show_solved
from ui.nonogram_widget import NonogramWidget
from ui.preferences import Preferences, app_settings
from ui.size_dialog import SizeDialog

logger = logging.getLogger(__name__)

ALERT_CLEAR_DELAY_MS = 5000
TITLE = "Nonogramz"
EDITOR_TITLE = "Nonogramz Editor"

BASIC_CONTROLS_HELP = "A: Undo, D: Redo, C: Clear, X: Measure, F: Fill"


class MainWindow(QMainWindow):
    """Main application window"""

    def __init__(self, session: GameSession, debug: bool = False):
        super().__init__()
        self.session = session
        self.file_loader_service = FileLoaderService()
        self.settings = app_settings()
        self.preferences_window = Preferences()
        self.debug_overlay = DebugOverlay() if debug else None
        self.debug_label: Optional[QLabel] = None

        self.puzzle_timer = QTimer(self)
        self.puzzle_timer.setInterval(1000)
        self.puzzle_timer.timeout.connect(self._update_timer_display)

        self.alert_timer = QTimer(self)
        self.alert_timer.setSingleShot(True)
        self.alert_timer.timeout.connect(self.clear_alert)

        self.init_ui()
        self.start_grid()

    def create_menu_bar(self):
        """Create the application menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        self._add_action(file_menu, "New Random Grid", "Ctrl+N", self.new_random_grid)
        self._add_action(file_menu, "Load Grid", "Ctrl+O", self.load_grid)
        self._add_action(file_menu, "Save Grid", "Ctrl+S", self.save_grid)
        file_menu.addSeparator()
        self._add_action(file_menu, "Exit", "Ctrl+Q", self.close)

        edit_menu = menubar.addMenu("Edit")
        self._add_action(edit_menu, "Undo", "Ctrl+Z", lambda: self._apply(self.session.undo()))
        self._add_action(edit_menu, "Redo", "Ctrl+Y", lambda: self._apply(self.session.redo()))
        self._add_action(edit_menu, "Clear", None, lambda: self._apply(self.session.clear()))

        tools_menu = menubar.addMenu("Tools")
        self._add_action(tools_menu, "Fill", None, lambda: self._apply(self.session.toggle_fill_mode()))
        self._add_action(tools_menu, "Measure From Selection", None, self.measure_selection)
        self.editor_action = self._add_action(tools_menu, "Editor Mode", None, self.toggle_editor)
        self.editor_action.setCheckable(True)

        grid_menu = menubar.addMenu("Grid")
        self._add_action(grid_menu, "Resize...", None, self.resize_grid)
        preferences_action = self._add_action(grid_menu, "Preferences", None, self.preferences_window.show)
        preferences_action.setMenuRole(QAction.PreferencesRole)

    def _add_action(self, menu, text, shortcut, slot) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(shortcut)
        action.triggered.connect(slot)
        menu.addAction(action)
        return action

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle(TITLE)
        self.resize(900, 800)
        self.create_menu_bar()

        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)

        self.timer_label = QLabel("00:00:00")
        self.timer_label.setFont(QFont("Arial", 12, QFont.Bold))
        self.timer_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.timer_label)

        self.nonogram_widget = NonogramWidget()
        self.nonogram_widget.grid_changed.connect(self.on_grid_changed)
        self.nonogram_widget.solved.connect(self.on_solved)
        self.nonogram_widget.alert.connect(self.show_alert)
        self.nonogram_widget.editor_toggle_requested.connect(self.toggle_editor)
        layout.addWidget(self.nonogram_widget, stretch=1)

        help_label = QLabel(BASIC_CONTROLS_HELP)
        help_label.setAlignment(Qt.AlignCenter)
        help_label.setStyleSheet("color: gray;")
        layout.addWidget(help_label)

        if self.debug_overlay:
            self.debug_label = QLabel()
            self.debug_label.setFont(QFont("Courier", 9))
            self.debug_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
            layout.addWidget(self.debug_label)

        self.setCentralWidget(central_widget)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def start_grid(self):
        """Show the session's current grid from the beginning"""
        self.nonogram_widget.set_session(self.session)
        self.timer_label.setText("00:00:00")
        self.puzzle_timer.start()
        self.on_grid_changed()
        self.nonogram_widget.setFocus()
        if self.session.solved:
            QTimer.singleShot(0, self.on_solved)

    def _apply(self, event: SessionEvent):
        self.nonogram_widget.handle_event(event)

    def on_grid_changed(self):
        if self.debug_overlay and self.debug_label:
            self.debug_label.setText("\n".join(self.debug_overlay.render(self.session.grid)))

    def on_solved(self):
        self.puzzle_timer.stop()
        self._update_timer_display()
        show_solved(self, self.session.solved_message())

    def _update_timer_display(self):
        self.timer_label.setText(format_seconds(self.session.elapsed_seconds()))
        if self.session.solved:
            self.puzzle_timer.stop()

    def show_alert(self, message: str):
        self.statusBar().showMessage(message)
        self.alert_timer.start(ALERT_CLEAR_DELAY_MS)

    def clear_alert(self):
        self.statusBar().clearMessage()

    def measure_selection(self):
        if self.nonogram_widget.selected is None:
            self.show_alert("Select a cell first")
            return
        self._apply(self.session.measure(self.nonogram_widget.selected))

    def toggle_editor(self):
        self._apply(self.session.toggle_editor())
        self.editor_action.setChecked(self.session.editor_enabled)
        self.setWindowTitle(EDITOR_TITLE if self.session.editor_enabled else TITLE)

    # ------------------------------------------------------------------
    # Grid lifecycle
    # ------------------------------------------------------------------
    def new_random_grid(self):
        self.session.new_random()
        self.start_grid()

    def resize_grid(self):
        dialog = SizeDialog(self.session.grid.size, self)
        if not dialog.exec():
            self.show_alert("Resize canceled")
            return
        event = self.session.resize(dialog.selected_size())
        self.start_grid()
        if event.message:
            self.show_alert(event.message)

    def load_grid(self):
        """Load a grid using a file dialog"""
        last_grid_dir = self.settings.value("last_grid_dir", "")
        file_path, _ = QFileDialog.getOpenFileName(
            self, caption="Load Grid", filter=f"Grid Files (*.{FILE_EXTENSION});;All Files (*)", dir=last_grid_dir
        )

        if file_path:
            self.settings.setValue("last_grid_dir", os.path.dirname(file_path))
            self.load_grid_from_path(file_path)

    def load_grid_from_path(self, file_path: str) -> bool:
        """Load a grid from an explicit filesystem path. A failed load keeps the current grid."""
        normalized_path = os.path.abspath(os.path.expanduser(file_path))
        try:
            grid = self.file_loader_service.load_grid_file(normalized_path)
        except (OSError, ValueError, GridLoadError) as e:
            logger.warning("Failed to load grid from %s: %s", normalized_path, e)
            QMessageBox.warning(self, "Error", f"Loading failed:\n{e}")
            return False

        self.session.load(grid)
        self.start_grid()
        return True

    def save_grid(self):
        """Save the current cells as a grid file"""
        directory = self.settings.value("grids_dir") or None
        try:
            path = self.file_loader_service.save_grid(self.session.grid, directory)
        except GridSaveError as e:
            QMessageBox.warning(self, "Error", f"Failed to save grid: {e}")
            return
        self.show_alert(f"Grid saved as {path.name}")

    def closeEvent(self, event):  # noqa: N802
        self.preferences_window.close()
        super().closeEvent(event)
