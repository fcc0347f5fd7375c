"""Undo/redo history for a grid.

The history never stores previous cell values. Undoing and redoing move a
cursor and rebuild the grid from scratch by replaying every operation before
the cursor, so every operation must only depend on the cells at the time it
is replayed and on its own parameters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple, Union

from models import tools
from models.cell import Cell, Point

if TYPE_CHECKING:
    from models.grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetCell:
    """The value a cell was set to"""
    point: Point
    cell: Cell


@dataclass(frozen=True)
class Measure:
    line_points: Tuple[Point, ...]


@dataclass(frozen=True)
class Fill:
    point: Point
    matched_cell: Cell
    fill_cell: Cell


@dataclass(frozen=True)
class Clear:
    pass


Operation = Union[SetCell, Measure, Fill, Clear]


def apply_operation(grid: Grid, operation: Operation) -> None:
    """Apply a single logged operation to the grid's cells."""
    if isinstance(operation, SetCell):
        grid.set_cell(operation.point, operation.cell)
    elif isinstance(operation, Measure):
        tools.measure(grid, operation.line_points)
    elif isinstance(operation, Fill):
        tools.fill(grid, operation.point, operation.matched_cell, operation.fill_cell)
    elif isinstance(operation, Clear):
        grid.clear()
    else:
        raise TypeError(f"Unknown operation: {operation!r}")


@dataclass
class UndoRedoBuffer:
    buffer: List[Operation] = field(default_factory=list)
    index: int = 0

    def push(self, operation: Operation) -> None:
        """Append an operation, discarding everything that was undone before it"""
        if self.index != len(self.buffer):
            del self.buffer[self.index:]
        self.buffer.append(operation)
        self.index += 1

    def can_undo(self) -> bool:
        return self.index > 0

    def can_redo(self) -> bool:
        return self.index < len(self.buffer)

    def undo(self, grid: Grid) -> bool:
        """Step back one operation and return whether that was possible."""
        if not self.can_undo():
            return False
        self.index -= 1
        self.rebuild(grid)
        return True

    def redo(self, grid: Grid) -> bool:
        """Step forward one operation and return whether that was possible."""
        if not self.can_redo():
            return False
        self.index += 1
        self.rebuild(grid)
        return True

    def rebuild(self, grid: Grid) -> None:
        grid.clear()
        for operation in self.buffer[:self.index]:
            apply_operation(grid, operation)
        logger.debug("Rebuilt grid from %d of %d operation(s)", self.index, len(self.buffer))
