from typing import List

from models.cell import Cell
from models.grid import Grid


def describe_grid(grid: Grid) -> str:
    """A compact description of the grid's state. Empty cells and clues are omitted."""
    cells = [cell for cell in grid.cells if cell != Cell.EMPTY]
    horizontal = [clues for clues in grid.horizontal_clues_solutions if clues]
    vertical = [clues for clues in grid.vertical_clues_solutions if clues]
    return (
        f"Grid {{ size: {grid.size}, "
        f"cells (empty omitted): {cells}, "
        f"horizontal_clues_solutions (empty omitted): {horizontal}, "
        f"vertical_clues_solutions (empty omitted): {vertical}, "
        f"max_clues_size: {grid.max_clues_size.width}x{grid.max_clues_size.height}, "
        f"undo_redo_buffer.index: {grid.undo_redo_buffer.index}, "
        f"undo_redo_buffer.buffer: omitted }}"
    )


class DebugOverlay:
    """Text for the debug display. Remembers how long the last text was so it can be padded over."""

    def __init__(self, line_length: int = 80):
        self.line_length = max(1, line_length)
        self.last_length = 0

    def render(self, grid: Grid) -> List[str]:
        text = describe_grid(grid)
        padded = text.ljust(self.last_length)
        self.last_length = len(text)
        return [
            padded[start:start + self.line_length]
            for start in range(0, len(padded), self.line_length)
        ]
