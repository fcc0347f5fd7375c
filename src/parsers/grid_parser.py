from typing import Dict, List, Optional, Tuple

from models.cell import MAX_GRID_SIZE, Cell, CellKind, Size
from models.grid import Grid

# Every cell is 4 characters wide and 2 lines high in a grid file.
CELL_WIDTH = 4

CELL_CHARS: Dict[str, Cell] = {
    " ": Cell.EMPTY,
    "1": Cell.FILLED,  # true, i.e. filled
    "X": Cell.CROSSED,  # looks like a cross
    "?": Cell.MAYBED,  # unclear
    "R": Cell.measured(),  # resembles 尺, a unit of measure
}

# Legend entries in the order they are written below the grid
LEGEND: List[Tuple[CellKind, str]] = [
    (CellKind.FILLED, "1: filled"),
    (CellKind.CROSSED, "X: crossed"),
    (CellKind.MAYBED, "?: maybed"),
    (CellKind.MEASURED, "R: measured"),
]

KIND_CHARS: Dict[CellKind, str] = {cell.kind: char for char, cell in CELL_CHARS.items()}


class GridLoadError(Exception):
    """Raised when grid file content is malformed"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number


class GridParser:
    """Parser and writer for the bordered ASCII grid format"""

    def parse_file(self, file_path: str) -> Tuple[Size, List[Cell]]:
        with open(file_path, "r", encoding="utf-8") as f:
            return self.parse(f.read())

    def parse(self, text: str) -> Tuple[Size, List[Cell]]:
        """Parse grid file content into its size and cells"""
        lines = text.splitlines()
        if not lines:
            raise GridLoadError("expected line", 1)

        cells: List[Cell] = []
        width: Optional[int] = None
        height = 0

        # Skip the top dash line and the second line of every row
        for line_index in range(1, len(lines), 2):
            line = lines[line_index]
            line_number = line_index + 1

            if line.startswith("+"):
                break
            if not line.startswith("|"):
                raise GridLoadError("expected '|' or '+' at start of line", line_number)

            line_width = self._parse_row(line, line_number, cells)

            if line_width == 0:
                raise GridLoadError("no width", line_number)
            if width is None:
                width = line_width
            elif line_width != width:
                raise GridLoadError(
                    f"inconsistent width: expected {width} cells, got {line_width}", line_number
                )
            height += 1

        if width is None or height == 0:
            raise GridLoadError("no height")
        if width > MAX_GRID_SIZE or height > MAX_GRID_SIZE:
            raise GridLoadError(f"grid size {width}x{height} exceeds {MAX_GRID_SIZE}")

        return Size(width, height), cells

    def _parse_row(self, line: str, line_number: int, cells: List[Cell]) -> int:
        line_width = 0
        for char in line[1::CELL_WIDTH]:
            if char == "|":
                break
            cell = CELL_CHARS.get(char)
            if cell is None:
                raise GridLoadError("expected ' ', '1', 'X', '?' or 'R'", line_number)
            cells.append(cell)
            line_width += 1
        return line_width

    def load(self, text: str) -> Grid:
        size, cells = self.parse(text)
        return Grid(size, cells)

    def serialize(self, grid: Grid) -> str:
        """Write the grid's current cells in the bordered format, followed by a legend"""
        dash_line = "+" + "-" * (CELL_WIDTH * grid.size.width) + "+"
        lines = [dash_line]

        for y in range(grid.size.height):
            row = "|" + "".join(
                KIND_CHARS[cell.kind] * CELL_WIDTH for cell in grid.row(y)
            ) + "|"
            lines.extend([row, row])

        lines.append(dash_line)
        lines.append("")

        present = {cell.kind for cell in grid.cells}
        lines.append(", ".join(text for kind, text in LEGEND if kind in present))

        return "\n".join(lines)
