"""Tests for the game session rules around the grid."""

import random

import pytest

from models.cell import Cell, Point, Size
from models.grid import Grid
from models.history import Clear, Fill, Measure, SetCell
from services.game_session import GameSession, format_seconds


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def _session(lines=("1  ", " 1 ", "   "), clock=None):
    return GameSession(Grid.from_lines(list(lines)), rng=random.Random(3), clock=clock or FakeClock())


def test_place_and_toggle_back():
    session = _session()

    event = session.place(Point(2, 2), Cell.FILLED)
    session.release()
    assert event.changed
    assert session.grid.get_cell(Point(2, 2)) == Cell.FILLED

    session.place(Point(2, 2), Cell.FILLED)
    session.release()
    assert session.grid.get_cell(Point(2, 2)) == Cell.EMPTY
    assert session.grid.undo_redo_buffer.buffer == [
        SetCell(Point(2, 2), Cell.FILLED),
        SetCell(Point(2, 2), Cell.EMPTY),
    ]


def test_drag_reuses_the_first_placed_cell():
    session = _session()
    session.place(Point(1, 0), Cell.CROSSED)
    session.release()

    # Starting on a crossed cell empties it, so the drag empties the rest too
    session.place(Point(1, 0), Cell.CROSSED)
    session.place(Point(2, 0), Cell.CROSSED)
    session.release()

    assert session.grid.row(0) == [Cell.EMPTY, Cell.EMPTY, Cell.EMPTY]

    session.place(Point(0, 2), Cell.MAYBED)
    session.place(Point(1, 2), Cell.MAYBED)
    session.place(Point(2, 2), Cell.MAYBED)
    session.release()
    assert session.grid.row(2) == [Cell.MAYBED] * 3


def test_unchanged_placement_pushes_nothing():
    session = _session()
    session.place(Point(0, 2), Cell.FILLED)
    session.place(Point(0, 2), Cell.FILLED)  # same drag

    assert len(session.grid.undo_redo_buffer.buffer) == 1


def test_fill_mode_fills_once():
    session = _session()
    session.place(Point(1, 0), Cell.CROSSED)
    session.release()

    event = session.toggle_fill_mode()
    assert event.message == "Set place to fill"

    event = session.place(Point(2, 2), Cell.MAYBED)
    assert event.changed
    assert not session.fill_mode
    assert session.grid.cells.count(Cell.MAYBED) == 8
    assert session.grid.undo_redo_buffer.buffer[-1] == Fill(Point(2, 2), Cell.EMPTY, Cell.MAYBED)

    session.undo()
    assert session.grid.cells.count(Cell.MAYBED) == 0
    session.redo()
    assert session.grid.cells.count(Cell.MAYBED) == 8


def test_fill_onto_same_cell_is_refused():
    session = _session()
    session.place(Point(0, 0), Cell.CROSSED)
    session.release()

    session.toggle_fill_mode()
    event = session.place(Point(0, 0), Cell.CROSSED)

    assert not event.changed
    assert event.message == "Nothing to fill"
    assert not session.fill_mode
    assert len(session.grid.undo_redo_buffer.buffer) == 1


def test_toggle_fill_mode_twice_cancels():
    session = _session()
    session.toggle_fill_mode()
    event = session.toggle_fill_mode()

    assert event.message == "Fill canceled"
    assert not session.fill_mode


def test_measure_needs_two_points():
    session = _session()
    event = session.measure(Point(0, 2))
    assert event.message == "Set measurement end"
    assert not event.changed

    event = session.measure(Point(2, 2))
    assert event.changed
    assert event.message == "Measured 3"
    assert session.grid.row(2) == [Cell.measured(1), Cell.measured(2), Cell.measured(3)]
    assert isinstance(session.grid.undo_redo_buffer.buffer[-1], Measure)
    assert session.measurement_start is None


def test_measure_outside_the_grid_raises():
    session = _session()
    with pytest.raises(IndexError):
        session.measure(Point(3, 0))


def test_clear_undo_redo():
    session = _session()
    session.place(Point(0, 0), Cell.FILLED)
    session.release()

    session.clear()
    assert session.grid.get_cell(Point(0, 0)) == Cell.EMPTY
    assert session.grid.undo_redo_buffer.buffer[-1] == Clear()

    assert session.undo().changed
    assert session.grid.get_cell(Point(0, 0)) == Cell.FILLED
    assert session.redo().changed
    assert session.grid.get_cell(Point(0, 0)) == Cell.EMPTY
    assert not session.redo().changed


def test_solving_records_the_duration():
    clock = FakeClock(10.0)
    session = _session(clock=clock)

    session.place(Point(0, 0), Cell.FILLED)
    session.release()
    clock.now = 75.0
    event = session.place(Point(1, 1), Cell.FILLED)

    assert event.solved
    assert session.solved
    assert session.elapsed_seconds() == 65
    assert session.solved_message() == "Solved in 00:01:05"


def test_solved_grid_takes_no_more_input():
    session = _session()
    session.place(Point(0, 0), Cell.FILLED)
    session.release()
    session.place(Point(1, 1), Cell.FILLED)
    session.release()

    event = session.place(Point(2, 2), Cell.FILLED)

    assert event.solved
    assert not event.changed
    assert session.grid.get_cell(Point(2, 2)) == Cell.EMPTY
    assert not session.undo().changed
    assert not session.clear().changed


def test_empty_picture_is_won_by_doing_nothing():
    session = _session(lines=("  ", "  "))

    assert session.solved
    assert session.solved_message() == "You won by doing nothing"


def test_slow_solve():
    clock = FakeClock(0.0)
    session = _session(lines=("1",), clock=clock)
    session.start_time = 0.0
    clock.now = 99 * 60 * 60 + 1
    session.place(Point(0, 0), Cell.FILLED)

    assert session.solved_message() == "That took too long"


def test_resize_regenerates_the_grid():
    session = _session()
    session.place(Point(0, 0), Cell.FILLED)
    old_grid = session.grid

    event = session.resize(Size(7, 4))

    assert session.grid is not old_grid
    assert session.grid.size == Size(7, 4)
    assert session.grid.undo_redo_buffer.buffer == []
    assert all(cell == Cell.EMPTY for cell in session.grid.cells)
    assert event.message == "New 7x4 grid"
    assert session.drag_cell is None


def test_resize_out_of_range_keeps_the_grid():
    session = _session()
    old_grid = session.grid

    with pytest.raises(ValueError):
        session.resize(Size(100, 5))
    assert session.grid is old_grid


def test_load_replaces_the_grid():
    session = _session()
    session.toggle_fill_mode()
    session.measure(Point(0, 0))

    event = session.load(Grid.from_lines(["11"]))

    assert event.changed
    assert session.grid.size == Size(2, 1)
    assert not session.fill_mode
    assert session.measurement_start is None


def test_editor_rebuilds_clues_of_edited_lines():
    session = _session()
    event = session.toggle_editor()
    assert event.message == "Editor enabled"

    event = session.place(Point(2, 2), Cell.FILLED)
    session.release()

    assert event.changed
    assert not event.solved
    assert session.grid.horizontal_clues_solutions == [[1], [1], [1]]
    assert session.grid.vertical_clues_solutions == [[1], [1], [1]]


def test_editor_fill_rebuilds_all_clues():
    session = _session()
    session.toggle_editor()
    session.toggle_fill_mode()

    session.place(Point(0, 0), Cell.FILLED)

    assert session.grid.horizontal_clues_solutions == [[3], [3], [3]]
    assert session.grid.vertical_clues_solutions == [[3], [3], [3]]

    event = session.toggle_editor()
    assert event.message == "Editor disabled"
    assert event.solved


def test_format_seconds():
    assert format_seconds(60 * 70 + 5) == "01:10:05"
    assert format_seconds(45 * 60 + 15) == "00:45:15"
    assert format_seconds(60 * 60 * 99) == "99:00:00"
    assert format_seconds(0) == "00:00:00"


def test_dragging_after_a_fill_keeps_the_filled_region():
    session = _session()
    session.toggle_fill_mode()

    session.place(Point(2, 2), Cell.CROSSED)
    session.place(Point(2, 2), Cell.CROSSED)
    session.place(Point(1, 2), Cell.CROSSED)

    assert all(cell == Cell.CROSSED for cell in session.grid.cells)
    assert session.grid.undo_redo_buffer.buffer == [Fill(Point(2, 2), Cell.EMPTY, Cell.CROSSED)]

    session.release()
    session.place(Point(1, 2), Cell.CROSSED)
    assert session.grid.get_cell(Point(1, 2)) == Cell.EMPTY


def test_refused_fill_ignores_the_rest_of_the_drag():
    session = _session()
    session.toggle_fill_mode()
    session.place(Point(0, 0), Cell.EMPTY)

    session.place(Point(0, 0), Cell.EMPTY)
    session.place(Point(1, 0), Cell.FILLED)

    assert session.grid.undo_redo_buffer.buffer == []


def test_leaving_the_editor_rechecks_a_solved_grid():
    clock = FakeClock(0.0)
    session = _session(clock=clock)
    session.place(Point(0, 0), Cell.FILLED)
    session.release()
    clock.now = 30.0
    session.place(Point(1, 1), Cell.FILLED)
    session.release()
    assert session.solved

    session.toggle_editor()
    # Bypasses the editor clue updates, so the targets no longer match
    session.grid.set_cell(Point(2, 2), Cell.FILLED)
    event = session.toggle_editor()

    assert not event.solved
    assert not session.solved
    assert not session.locked
    assert session.solve_duration is None

    clock.now = 50.0
    event = session.place(Point(2, 2), Cell.FILLED)

    assert event.solved
    assert session.elapsed_seconds() == 20
    assert session.solved_message() == "Solved in 00:00:20"


def test_leaving_the_editor_on_a_still_solved_grid_does_not_announce_again():
    session = _session()
    session.place(Point(0, 0), Cell.FILLED)
    session.release()
    session.place(Point(1, 1), Cell.FILLED)
    session.release()

    session.toggle_editor()
    event = session.toggle_editor()

    assert event.changed
    assert not event.solved
    assert session.solved
    assert session.locked
