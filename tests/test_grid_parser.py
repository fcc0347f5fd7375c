"""Tests for reading and writing grid files."""

import pytest

from models.cell import Cell, Point, Size
from models.grid import Grid
from parsers.grid_parser import GridLoadError, GridParser

GRID_TEXT = "\n".join([
    "+------------+",
    "|1111    XXXX|",
    "|1111    XXXX|",
    "|????RRRR1111|",
    "|????RRRR1111|",
    "+------------+",
    "",
    "1: filled, X: crossed, ?: maybed, R: measured",
])


def _rows(*rows):
    lines = ["+" + "-" * 4 * len(rows[0]) + "+"]
    for row in rows:
        line = "|" + "".join(char * 4 for char in row) + "|"
        lines.extend([line, line])
    lines.append(lines[0])
    return "\n".join(lines)


def test_parse_reads_size_and_cells():
    size, cells = GridParser().parse(GRID_TEXT)

    assert size == Size(3, 2)
    assert cells == [
        Cell.FILLED, Cell.EMPTY, Cell.CROSSED,
        Cell.MAYBED, Cell.measured(), Cell.FILLED,
    ]


def test_load_uses_filled_cells_as_the_picture():
    grid = GridParser().load(GRID_TEXT)

    assert grid.horizontal_clues_solutions == [[1], [1]]
    assert grid.vertical_clues_solutions == [[1], [], [1]]
    assert grid.get_cell(Point(0, 0)) == Cell.EMPTY
    assert grid.get_cell(Point(2, 0)) == Cell.CROSSED


def test_parse_single_cell():
    size, cells = GridParser().parse(_rows("1"))

    assert size == Size(1, 1)
    assert cells == [Cell.FILLED]


def test_rows_without_closing_dash_line():
    text = "\n".join(_rows("1 ", " 1").splitlines()[:-1])

    size, _ = GridParser().parse(text)

    assert size == Size(2, 2)


@pytest.mark.parametrize(
    "text, message, line_number",
    [
        ("", "expected line", 1),
        ("+----+\n#1111#", "expected '|' or '+' at start of line", 2),
        ("+----+\n|ZZZZ|", "expected ' ', '1', 'X', '?' or 'R'", 2),
        ("+----+\n||", "no width", 2),
        ("+--------+\n|1111    |\n|1111    |\n|1111|", "inconsistent width", 4),
    ],
)
def test_malformed_grids_report_the_line(text, message, line_number):
    with pytest.raises(GridLoadError) as excinfo:
        GridParser().parse(text)

    assert excinfo.value.message.startswith(message)
    assert excinfo.value.line_number == line_number


def test_grid_without_rows_has_no_height():
    with pytest.raises(GridLoadError, match="no height"):
        GridParser().parse("+----+\n")


def test_grid_larger_than_the_limit_is_rejected():
    with pytest.raises(GridLoadError, match="exceeds 99"):
        GridParser().parse(_rows("1" * 100))


def test_serialize_writes_the_current_cells():
    grid = Grid.from_lines(["11", "  "])
    grid.set_cell(Point(0, 0), Cell.FILLED)
    grid.set_cell(Point(1, 1), Cell.CROSSED)

    text = GridParser().serialize(grid)

    assert text.splitlines() == [
        "+--------+",
        "|1111    |",
        "|1111    |",
        "|    XXXX|",
        "|    XXXX|",
        "+--------+",
        "",
        "1: filled, X: crossed",
    ]


def test_serialize_drops_measurement_indexes():
    grid = Grid(Size(2, 1), [Cell.EMPTY, Cell.EMPTY])
    grid.set_cell(Point(1, 0), Cell.measured(7))

    text = GridParser().serialize(grid)
    _, cells = GridParser().parse(text)

    assert text.splitlines()[-1] == "R: measured"
    assert cells == [Cell.EMPTY, Cell.measured()]
