"""The active game: one grid plus the input state around it.

The session turns player actions into grid operations, records them in the
grid's history and keeps track of whether and when the grid got solved. It
never draws anything; front ends redraw from the returned events.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from models import tools
from models.cell import Cell, Point, Size, validate_size
from models.grid import Grid
from models.history import Clear, Fill, Measure, SetCell

logger = logging.getLogger(__name__)

HOUR = 60 * 60
MAX_SOLVE_SECONDS = HOUR * 99


def format_seconds(total_seconds: int) -> str:
    """Format seconds as hh:mm:ss"""
    seconds = total_seconds % 60
    minutes = total_seconds // 60 % 60
    hours = total_seconds // HOUR
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass
class SessionEvent:
    """What an action did, for the front end to react to."""
    changed: bool = False
    solved: bool = False
    message: Optional[str] = None


class GameSession:
    def __init__(self, grid: Grid, rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.rng = rng
        self.clock = clock
        self.editor_enabled = False
        self._start_grid(grid)

    def _start_grid(self, grid: Grid) -> None:
        self.grid = grid
        self.fill_mode = False
        self.measurement_start: Optional[Point] = None
        self.drag_cell: Optional[Cell] = None
        # Set by a fill until the button that started it is released
        self.filling = False
        self.start_time: Optional[float] = None
        self.solve_duration: Optional[float] = None
        # e.g. a picture without any filled cells
        self.solved = grid.is_solved()
        self.won_by_doing_nothing = self.solved

    @property
    def locked(self) -> bool:
        """A solved grid takes no more input, unless it is being edited"""
        return self.solved and not self.editor_enabled

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, grid: Grid) -> SessionEvent:
        self._start_grid(grid)
        logger.info("Started %s grid", grid.size)
        return SessionEvent(changed=True, solved=self.solved)

    def new_random(self, size: Optional[Size] = None) -> SessionEvent:
        return self.load(Grid.random(size or self.grid.size, rng=self.rng))

    def resize(self, size: Size) -> SessionEvent:
        """Throw away the current grid for a new random one of the given size."""
        validate_size(size)
        event = self.new_random(size)
        event.message = f"New {size} grid"
        return event

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def place(self, point: Point, cell: Cell) -> SessionEvent:
        """Place a cell where the player clicked or dragged.

        Placing a cell onto the same cell empties it. The first cell of a drag
        decides what is placed on the rest of it.
        """
        if self.locked:
            return SessionEvent(solved=True)

        if self.filling:
            return SessionEvent()
        if self.fill_mode:
            return self._fill(point, cell)

        current_cell = self.grid.get_cell(point)
        if self.drag_cell is None:
            self.drag_cell = Cell.EMPTY if current_cell == cell else cell
        cell_to_place = self.drag_cell

        if current_cell == cell_to_place:
            return SessionEvent()

        self.grid.set_cell(point, cell_to_place)
        self.grid.undo_redo_buffer.push(SetCell(point, cell_to_place))

        if self.editor_enabled:
            self.grid.update_clue_solutions(point)

        return self._after_change()

    def release(self) -> None:
        """End the current drag"""
        self.drag_cell = None
        self.filling = False

    def toggle_fill_mode(self) -> SessionEvent:
        self.fill_mode = not self.fill_mode
        message = "Set place to fill" if self.fill_mode else "Fill canceled"
        return SessionEvent(message=message)

    def _fill(self, point: Point, fill_cell: Cell) -> SessionEvent:
        self.fill_mode = False
        self.drag_cell = None
        self.filling = True
        matched_cell = self.grid.get_cell(point)

        if not tools.fill(self.grid, point, matched_cell, fill_cell):
            return SessionEvent(message="Nothing to fill")

        self.grid.undo_redo_buffer.push(Fill(point, matched_cell, fill_cell))
        self._refresh_editor_clues()
        return self._after_change()

    def measure(self, point: Point) -> SessionEvent:
        """Mark the start of a measurement, or measure from the marked start to `point`."""
        if self.locked:
            return SessionEvent(solved=True)
        self.grid.get_index(point)

        if self.measurement_start is None:
            self.measurement_start = point
            return SessionEvent(message="Set measurement end")

        line_points = tuple(tools.get_line_points(self.measurement_start, point))
        self.measurement_start = None

        tools.measure(self.grid, line_points)
        self.grid.undo_redo_buffer.push(Measure(line_points))
        event = self._after_change()
        event.message = f"Measured {len(line_points)}"
        return event

    def undo(self) -> SessionEvent:
        if self.locked or not self.grid.undo():
            return SessionEvent(solved=self.solved)
        self._refresh_editor_clues()
        return self._after_change()

    def redo(self) -> SessionEvent:
        if self.locked or not self.grid.redo():
            return SessionEvent(solved=self.solved)
        self._refresh_editor_clues()
        return self._after_change()

    def clear(self) -> SessionEvent:
        if self.locked:
            return SessionEvent(solved=True)
        self.grid.clear()
        self.grid.undo_redo_buffer.push(Clear())
        self._refresh_editor_clues()
        return self._after_change()

    def toggle_editor(self) -> SessionEvent:
        self.editor_enabled = not self.editor_enabled
        self.drag_cell = None
        if self.editor_enabled:
            return SessionEvent(message="Editor enabled")

        if self.solved:
            if self.grid.is_solved():
                # Still solved, the win was already announced
                return SessionEvent(changed=True, message="Editor disabled")
            self.solved = False
            self.won_by_doing_nothing = False
            self.solve_duration = None
            self.start_time = None

        event = self._after_change()
        event.message = "Editor disabled"
        return event

    # ------------------------------------------------------------------
    # Solve tracking
    # ------------------------------------------------------------------
    def elapsed_seconds(self) -> int:
        if self.solve_duration is not None:
            return int(self.solve_duration)
        if self.start_time is None:
            return 0
        return int(self.clock() - self.start_time)

    def solved_message(self) -> str:
        if self.won_by_doing_nothing:
            return "You won by doing nothing"
        seconds = self.elapsed_seconds()
        if seconds > MAX_SOLVE_SECONDS:
            return "That took too long"
        return f"Solved in {format_seconds(seconds)}"

    def _after_change(self) -> SessionEvent:
        if self.start_time is None:
            self.start_time = self.clock()

        if self.editor_enabled:
            return SessionEvent(changed=True)

        if not self.solved and self.grid.is_solved():
            self.solved = True
            self.solve_duration = self.clock() - self.start_time
            logger.info("Grid solved in %s", format_seconds(int(self.solve_duration)))
        return SessionEvent(changed=True, solved=self.solved)

    def _refresh_editor_clues(self) -> None:
        if self.editor_enabled:
            self.grid.rebuild_clue_solutions()
