"""Grid tools: flood fill and the measurement line."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Iterator, List

from models.cell import Cell, CellKind, Point

if TYPE_CHECKING:
    from models.grid import Grid

logger = logging.getLogger(__name__)


def fill(grid: Grid, point: Point, matched_cell: Cell, fill_cell: Cell) -> bool:
    """Replace every cell 4-connected to `point` that matches `matched_cell` with `fill_cell`.

    Returns False without touching the grid if the two cells match each other,
    since the fill would never run out of matching cells.
    """
    if matched_cell.matches(fill_cell):
        return False

    width = grid.size.width
    height = grid.size.height
    cells = grid.cells
    stack: List[int] = [grid.get_index(point)]
    filled = 0

    while stack:
        index = stack.pop()
        if not cells[index].matches(matched_cell):
            continue
        cells[index] = fill_cell
        filled += 1

        y, x = divmod(index, width)
        if y > 0:
            stack.append(index - width)
        if y < height - 1:
            stack.append(index + width)
        if x > 0:
            stack.append(index - 1)
        if x < width - 1:
            stack.append(index + 1)

    logger.debug("Filled %d cell(s) from %s with %r", filled, point, fill_cell)
    return filled > 0


def get_line_points(start_point: Point, end_point: Point) -> Iterator[Point]:
    """Yield the points of a Bresenham line from `start_point` to `end_point`, both included."""
    x, y = start_point.x, start_point.y
    dx = abs(end_point.x - x)
    dy = -abs(end_point.y - y)
    step_x = 1 if x < end_point.x else -1
    step_y = 1 if y < end_point.y else -1
    error = dx + dy

    while True:
        yield Point(x, y)
        if x == end_point.x and y == end_point.y:
            return
        doubled_error = 2 * error
        if doubled_error >= dy:
            error += dy
            x += step_x
        if doubled_error <= dx:
            error += dx
            y += step_y


def measure(grid: Grid, line_points: Iterable[Point]) -> None:
    """Number the empty and measured cells along the line, starting at 1.

    Filled, crossed and maybed cells keep their value but still count.
    """
    for index, point in enumerate(line_points, start=1):
        cell = grid.get_cell(point)
        if cell.kind in (CellKind.EMPTY, CellKind.MEASURED):
            grid.set_cell(point, Cell.measured(index))
