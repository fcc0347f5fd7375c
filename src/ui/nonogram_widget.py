from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal, QRectF
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PySide6.QtWidgets import QWidget

from models.cell import Cell, CellKind, Point
from models.grid import Grid
from services.game_session import GameSession, SessionEvent

logger = logging.getLogger(__name__)

# Every 5 cells the shading changes so that cells are easier to tell apart
SEPARATION_POINT = 5

CELL_COLORS = {
    CellKind.FILLED: QColor(30, 30, 30),
    CellKind.MAYBED: QColor(70, 110, 220),
    CellKind.CROSSED: QColor(210, 70, 70),
    CellKind.MEASURED: QColor(80, 180, 90),
}
EMPTY_COLORS = (QColor(236, 236, 236), QColor(222, 222, 222))
CLUE_STRIPE_COLOR = QColor(238, 238, 238)
SOLVED_CLUE_COLOR = QColor(170, 170, 170)
SELECTION_COLOR = QColor(255, 220, 90, 140)

MOUSE_CELLS = {
    Qt.MouseButton.LeftButton: Cell.FILLED,
    Qt.MouseButton.MiddleButton: Cell.MAYBED,
    Qt.MouseButton.RightButton: Cell.CROSSED,
}
KEY_CELLS = {
    Qt.Key_Q: Cell.FILLED,
    Qt.Key_W: Cell.MAYBED,
    Qt.Key_E: Cell.CROSSED,
}


class NonogramWidget(QWidget):
    """Widget for displaying and playing a nonogram grid."""

    grid_changed = Signal()
    solved = Signal()
    alert = Signal(str)
    editor_toggle_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.session: Optional[GameSession] = None
        self.selected: Optional[Point] = None
        self.cell_size = 1
        self.origin_x = 0
        self.origin_y = 0
        self.setMouseTracking(True)
        self.setMinimumSize(300, 300)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setContextMenuPolicy(Qt.PreventContextMenu)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def grid(self) -> Optional[Grid]:
        return self.session.grid if self.session else None

    def set_session(self, session: GameSession) -> None:
        self.session = session
        logger.debug("Showing %s grid", session.grid.size)
        self.selected = None
        self._recompute_cell_metrics()
        self.update()

    def handle_event(self, event: SessionEvent) -> None:
        if event.message:
            self.alert.emit(event.message)
        if event.changed:
            self._recompute_cell_metrics()
            self.grid_changed.emit()
            self.update()
        if event.changed and event.solved:
            self.solved.emit()

    def cell_at(self, x: float, y: float) -> Optional[Point]:
        """Translate widget coordinates into a grid point, if they are on the grid."""
        if not self.grid:
            return None
        col = int((x - self.origin_x) // self.cell_size)
        row = int((y - self.origin_y) // self.cell_size)
        point = Point(col, row)
        if x < self.origin_x or y < self.origin_y or not self.grid.size.contains(point):
            return None
        return point

    # ------------------------------------------------------------------
    # Qt event handlers
    # ------------------------------------------------------------------
    def focusNextPrevChild(self, next: bool) -> bool:
        return False  # Tab toggles the editor

    def resizeEvent(self, event):  # noqa: N802
        super().resizeEvent(event)
        if self.grid:
            self._recompute_cell_metrics()
            self.update()

    def paintEvent(self, event):  # noqa: N802 (Qt override)
        if not self.grid:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        solved_lines = self._draw_clues(painter)
        self._draw_cells(painter)
        self._draw_picture(painter)
        self._draw_progress_bar(painter, solved_lines)
        painter.end()

    def mousePressEvent(self, event):  # noqa: N802
        if not self.session:
            return
        point = self.cell_at(event.position().x(), event.position().y())
        cell = MOUSE_CELLS.get(event.button())
        if point is None or cell is None:
            return
        self.selected = point
        self.setFocus()
        self.handle_event(self.session.place(point, cell))
        self.update()

    def mouseMoveEvent(self, event):  # noqa: N802
        if not self.session:
            return
        point = self.cell_at(event.position().x(), event.position().y())
        if point is None:
            return
        if point != self.selected:
            self.selected = point
            self.update()

        for button, cell in MOUSE_CELLS.items():
            if event.buttons() & button:
                self.handle_event(self.session.place(point, cell))
                break

    def mouseReleaseEvent(self, event):  # noqa: N802
        if self.session:
            self.session.release()

    def keyPressEvent(self, event):  # noqa: N802
        if not self.session:
            return
        key = event.key()

        if key in (Qt.Key_Up, Qt.Key_Down, Qt.Key_Left, Qt.Key_Right):
            self._move_selection(key)
        elif key in KEY_CELLS:
            if self.selected is not None:
                self.handle_event(self.session.place(self.selected, KEY_CELLS[key]))
                self.session.release()
        elif key == Qt.Key_A:
            self.handle_event(self.session.undo())
        elif key == Qt.Key_D:
            self.handle_event(self.session.redo())
        elif key == Qt.Key_C:
            self.handle_event(self.session.clear())
        elif key == Qt.Key_F:
            self.handle_event(self.session.toggle_fill_mode())
        elif key == Qt.Key_X:
            if self.selected is not None:
                self.handle_event(self.session.measure(self.selected))
        elif key == Qt.Key_Tab:
            self.editor_toggle_requested.emit()
        else:
            super().keyPressEvent(event)
            return
        self.update()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _clue_columns(self) -> int:
        return max(1, self.grid.max_clues_size.width)

    def _clue_rows(self) -> int:
        return max(1, self.grid.max_clues_size.height)

    def _recompute_cell_metrics(self) -> None:
        """Update cell size based on the current widget dimensions."""
        if not self.grid:
            return
        rect = self.contentsRect()
        columns = self._clue_columns() + self.grid.size.width
        rows = self._clue_rows() + self.grid.size.height + 1  # progress bar
        self.cell_size = max(1, min(rect.width() // columns, rect.height() // rows))

        used_width = columns * self.cell_size
        used_height = rows * self.cell_size
        self.origin_x = (rect.width() - used_width) // 2 + self._clue_columns() * self.cell_size
        self.origin_y = (rect.height() - used_height) // 2 + self._clue_rows() * self.cell_size

    def _move_selection(self, key) -> None:
        """Move the selection, wrapping around the grid edges"""
        size = self.grid.size
        if self.selected is None:
            self.selected = Point(size.width // 2, size.height // 2)
            return
        x, y = self.selected.x, self.selected.y
        if key == Qt.Key_Up:
            y = (y - 1) % size.height
        elif key == Qt.Key_Down:
            y = (y + 1) % size.height
        elif key == Qt.Key_Left:
            x = (x - 1) % size.width
        else:
            x = (x + 1) % size.width
        self.selected = Point(x, y)

    # ------------------------------------------------------------------
    # Drawing helpers
    # ------------------------------------------------------------------
    def _cell_rect(self, x: int, y: int) -> QRectF:
        return QRectF(
            self.origin_x + x * self.cell_size,
            self.origin_y + y * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def _draw_clues(self, painter: QPainter) -> int:
        """Draw the clue solutions and return how many lines are solved."""
        grid = self.grid
        size = self.cell_size
        painter.setFont(QFont("Arial", max(6, int(size * 0.45))))
        solved_lines = 0

        for x, clues in enumerate(grid.vertical_clues_solutions):
            solved = grid.is_column_solved(x)
            solved_lines += solved
            column_x = self.origin_x + x * size
            if x % 2 == 0:
                painter.fillRect(
                    QRectF(column_x, self.origin_y - self._clue_rows() * size, size, self._clue_rows() * size),
                    CLUE_STRIPE_COLOR,
                )
            painter.setPen(QPen(SOLVED_CLUE_COLOR if solved else Qt.black))
            for i, clue in enumerate(reversed(clues)):
                rect = QRectF(column_x, self.origin_y - (i + 1) * size, size, size)
                painter.drawText(rect, Qt.AlignCenter, str(clue))

        for y, clues in enumerate(grid.horizontal_clues_solutions):
            solved = grid.is_row_solved(y)
            solved_lines += solved
            row_y = self.origin_y + y * size
            if y % 2 == 0:
                painter.fillRect(
                    QRectF(self.origin_x - self._clue_columns() * size, row_y, self._clue_columns() * size, size),
                    CLUE_STRIPE_COLOR,
                )
            painter.setPen(QPen(SOLVED_CLUE_COLOR if solved else Qt.black))
            for i, clue in enumerate(reversed(clues)):
                rect = QRectF(self.origin_x - (i + 1) * size, row_y, size, size)
                painter.drawText(rect, Qt.AlignCenter, str(clue))

        return solved_lines

    def _draw_cells(self, painter: QPainter) -> None:
        grid = self.grid
        painter.setFont(QFont("Arial", max(6, int(self.cell_size * 0.4))))
        for y in range(grid.size.height):
            for x, cell in enumerate(grid.row(y)):
                self._draw_cell(painter, x, y, cell)

        painter.setPen(QPen(Qt.gray, 1))
        for y in range(grid.size.height + 1):
            line_y = self.origin_y + y * self.cell_size
            painter.drawLine(self.origin_x, line_y, self.origin_x + grid.size.width * self.cell_size, line_y)
        for x in range(grid.size.width + 1):
            line_x = self.origin_x + x * self.cell_size
            painter.drawLine(line_x, self.origin_y, line_x, self.origin_y + grid.size.height * self.cell_size)

    def _draw_cell(self, painter: QPainter, x: int, y: int, cell: Cell) -> None:
        rect = self._cell_rect(x, y)

        if cell.kind is CellKind.EMPTY:
            x_reached_point = x // SEPARATION_POINT % 2 == 0
            y_reached_point = y // SEPARATION_POINT % 2 == 0
            painter.fillRect(rect, EMPTY_COLORS[x_reached_point ^ y_reached_point])
        else:
            painter.fillRect(rect, QBrush(CELL_COLORS[cell.kind]))

        if cell.kind is CellKind.CROSSED:
            painter.setPen(QPen(Qt.white, 2))
            inset = rect.adjusted(4, 4, -4, -4)
            painter.drawLine(inset.topLeft(), inset.bottomRight())
            painter.drawLine(inset.topRight(), inset.bottomLeft())
        elif cell.is_measured() and cell.index is not None:
            painter.setPen(QPen(Qt.black))
            painter.drawText(rect, Qt.AlignCenter, str(cell.index))

        if self.selected == Point(x, y):
            painter.fillRect(rect, SELECTION_COLOR)

    def _draw_picture(self, painter: QPainter) -> None:
        """Draw the cells in small in the top left corner, to see the whole picture"""
        grid = self.grid
        corner_width = self._clue_columns() * self.cell_size
        corner_height = self._clue_rows() * self.cell_size
        pixel = max(1, min(corner_width // grid.size.width, corner_height // grid.size.height))
        left = self.origin_x - corner_width + (corner_width - pixel * grid.size.width) // 2
        top = self.origin_y - corner_height + (corner_height - pixel * grid.size.height) // 2

        for y in range(grid.size.height):
            for x, cell in enumerate(grid.row(y)):
                if cell.kind is not CellKind.EMPTY:
                    painter.fillRect(left + x * pixel, top + y * pixel, pixel, pixel, CELL_COLORS[cell.kind])

    def _draw_progress_bar(self, painter: QPainter, solved_lines: int) -> None:
        grid = self.grid
        total = grid.size.width + grid.size.height
        bar_width = grid.size.width * self.cell_size
        top = self.origin_y + grid.size.height * self.cell_size + self.cell_size // 4
        height = max(2, self.cell_size // 2)
        done = int(solved_lines / total * bar_width)
        painter.fillRect(self.origin_x, top, bar_width, height, QColor(210, 210, 210))
        painter.fillRect(self.origin_x, top, done, height, QColor(120, 120, 120))
