#!/usr/bin/env python3
"""Nonogramz application entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from PySide6.QtWidgets import QApplication

from models.cell import MAX_GRID_SIZE, MIN_GRID_SIZE, Size
from models.grid import Grid
from parsers.grid_parser import GridLoadError
from services.file_loader import FileLoaderService, valid_extension
from services.game_session import GameSession
from ui.main_window import MainWindow
from ui.preferences import app_settings, default_grid_size

logger = logging.getLogger(__name__)


class ArgumentError(Exception):
    """Raised when the grid argument is neither a grid file nor a size"""


def _parse_command_line(argv: List[str]) -> Tuple[argparse.Namespace, List[str]]:
    """Return (args, argv_for_qt)."""

    parser = argparse.ArgumentParser(
        prog="nonogramz",
        description="Play nonograms/picross.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "grid",
        nargs="?",
        help=f"Path to a grid file to open, or a grid size in range {MIN_GRID_SIZE} to {MAX_GRID_SIZE}",
    )
    parser.add_argument("--debug", action="store_true", help="Show the debug overlay and debug logging")
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def parse_size(value: str) -> Size:
    """Parse a square grid size"""
    try:
        length = int(value)
    except ValueError:
        raise ArgumentError("file not found")
    if not MIN_GRID_SIZE <= length <= MAX_GRID_SIZE:
        raise ArgumentError(f"grid size must be in range {MIN_GRID_SIZE} to {MAX_GRID_SIZE}")
    return Size.square(length)


def get_grid(argument: Optional[str], default_size: int) -> Grid:
    """Build the first grid from the command line argument"""
    if argument is None:
        return Grid.random(Size.square(default_size))

    # Check for a file first so that filenames consisting of numbers are accepted too
    if os.path.exists(argument):
        if not valid_extension(argument):
            raise ArgumentError(f"unsupported grid file: {argument}")
        return FileLoaderService().load_grid_file(argument)

    return Grid.random(parse_size(argument))


def main():
    """Main entry point for the application."""
    args, qt_argv = _parse_command_line(sys.argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(qt_argv)
    app.setApplicationName("Nonogramz")
    app.setApplicationVersion("1.0.0")
    app.setOrganizationName("Nonogramz")

    try:
        grid = get_grid(args.grid, default_grid_size(app_settings()))
    except (ArgumentError, GridLoadError, OSError, ValueError) as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    window = MainWindow(GameSession(grid), debug=args.debug)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
