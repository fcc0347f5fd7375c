import logging
import random
from dataclasses import dataclass
from itertools import groupby
from typing import Iterable, List, Optional, Sequence

from models.cell import Cell, Point, Size, validate_size
from models.history import UndoRedoBuffer

logger = logging.getLogger(__name__)

# A single clue: how many filled cells there are in a row at some point of a line.
Clue = int
Clues = List[Clue]

FILLED_PROBABILITY = 0.75


def line_clues(cells: Iterable[Cell]) -> Clues:
    """Run-length encode a line of cells, keeping the lengths of the filled runs"""
    return [
        sum(1 for _ in run)
        for filled, run in groupby(cell.is_filled() for cell in cells)
        if filled
    ]


@dataclass
class ClueSize:
    """The most clues any row (width) and any column (height) has."""
    width: int = 0
    height: int = 0


class Grid:
    """A nonogram grid.

    `cells` holds the player's input and starts out without any filled cells.
    The clue solutions are derived from the picture the grid was created from.
    """

    def __init__(self, size: Size, cells: List[Cell]):
        validate_size(size)
        if len(cells) != size.product():
            raise ValueError(
                f"expected {size.product()} cells for a {size} grid, got {len(cells)}"
            )

        self.size = size
        self.cells = list(cells)

        self.horizontal_clues_solutions: List[Clues] = [
            self.get_horizontal_clues(y) for y in range(size.height)
        ]
        self.vertical_clues_solutions: List[Clues] = [
            self.get_vertical_clues(x) for x in range(size.width)
        ]
        self.max_clues_size = ClueSize()
        self._update_max_clues_size()

        # The picture is only known through the clues from now on
        for index, cell in enumerate(self.cells):
            if cell.is_filled():
                self.cells[index] = Cell.EMPTY

        self.undo_redo_buffer = UndoRedoBuffer()
        logger.debug("Created %s grid", size)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "Grid":
        """Create a grid from rows of '1' (filled) and ' ' (empty)"""
        width = max(len(line) for line in lines)
        cells = []
        for line in lines:
            for char in line.ljust(width):
                if char == "1":
                    cells.append(Cell.FILLED)
                elif char == " ":
                    cells.append(Cell.EMPTY)
                else:
                    raise ValueError("the lines must only contain '1' or ' '")
        return cls(Size(width, len(lines)), cells)

    @classmethod
    def random(cls, size: Size, probability: float = FILLED_PROBABILITY,
               rng: Optional[random.Random] = None) -> "Grid":
        """Create a grid out of random noise. The result is not necessarily uniquely solvable."""
        validate_size(size)
        return cls(size, random_cells(size.product(), probability, rng))

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get_index(self, point: Point) -> int:
        index = point.y * self.size.width + point.x
        if not self.size.contains(point):
            raise IndexError(f"cell access at {point} with index {index} is out of bounds")
        return index

    def get_cell(self, point: Point) -> Cell:
        return self.cells[self.get_index(point)]

    def set_cell(self, point: Point, cell: Cell) -> None:
        self.cells[self.get_index(point)] = cell

    def row(self, y: int) -> List[Cell]:
        start = y * self.size.width
        return self.cells[start:start + self.size.width]

    def column(self, x: int) -> List[Cell]:
        return self.cells[x::self.size.width]

    def picture(self) -> List[Cell]:
        return list(self.cells)

    def clear(self) -> None:
        """Reset every cell. The history is left alone."""
        self.cells[:] = [Cell.EMPTY] * len(self.cells)

    # ------------------------------------------------------------------
    # Clues
    # ------------------------------------------------------------------
    def get_horizontal_clues(self, y: int) -> Clues:
        return line_clues(self.row(y))

    def get_vertical_clues(self, x: int) -> Clues:
        return line_clues(self.column(x))

    def is_row_solved(self, y: int) -> bool:
        return self.get_horizontal_clues(y) == self.horizontal_clues_solutions[y]

    def is_column_solved(self, x: int) -> bool:
        return self.get_vertical_clues(x) == self.vertical_clues_solutions[x]

    def solved_line_count(self) -> int:
        """How many rows and columns currently match their clue solutions"""
        rows = sum(1 for y in range(self.size.height) if self.is_row_solved(y))
        columns = sum(1 for x in range(self.size.width) if self.is_column_solved(x))
        return rows + columns

    def is_solved(self) -> bool:
        return all(self.is_row_solved(y) for y in range(self.size.height)) and all(
            self.is_column_solved(x) for x in range(self.size.width)
        )

    def update_clue_solutions(self, point: Point) -> None:
        """Rebuild the clue solutions of the row and column of `point` from the current cells.

        Used while editing, where the cells are the picture being drawn.
        """
        self.get_index(point)
        self.horizontal_clues_solutions[point.y] = self.get_horizontal_clues(point.y)
        self.vertical_clues_solutions[point.x] = self.get_vertical_clues(point.x)
        self._update_max_clues_size()

    def rebuild_clue_solutions(self) -> None:
        """Rebuild every clue solution from the current cells, after edits touching many lines"""
        self.horizontal_clues_solutions = [
            self.get_horizontal_clues(y) for y in range(self.size.height)
        ]
        self.vertical_clues_solutions = [
            self.get_vertical_clues(x) for x in range(self.size.width)
        ]
        self._update_max_clues_size()

    def _update_max_clues_size(self) -> None:
        self.max_clues_size.width = max(len(clues) for clues in self.horizontal_clues_solutions)
        self.max_clues_size.height = max(len(clues) for clues in self.vertical_clues_solutions)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        return self.undo_redo_buffer.undo(self)

    def redo(self) -> bool:
        return self.undo_redo_buffer.redo(self)


def random_cells(count: int, probability: float = FILLED_PROBABILITY,
                 rng: Optional[random.Random] = None) -> List[Cell]:
    """Sample each cell independently: filled with `probability`, empty otherwise"""
    rng = rng or random.Random()
    return [Cell.from_filled(rng.random() < probability) for _ in range(count)]
