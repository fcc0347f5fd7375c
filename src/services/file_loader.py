import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from models.grid import Grid
from parsers.grid_parser import GridLoadError, GridParser

logger = logging.getLogger(__name__)

FILE_EXTENSION = "nono"
MAX_SAVE_FILES = 9


def valid_extension(file_path: str) -> bool:
    return Path(file_path).suffix == f".{FILE_EXTENSION}"


class GridSaveError(Exception):
    """Raised when a grid could not be written to disk"""


class FileLoaderService:
    """Service for loading and saving grid files"""

    def __init__(self):
        self.parser = GridParser()
        self.save_path: Optional[Path] = None

    def load_grid_file(self, file_path: str) -> Grid:
        """Load a grid from a grid file"""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        if not valid_extension(file_path):
            raise ValueError(f'File extension must be ".{FILE_EXTENSION}"')

        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        try:
            grid = self.parser.load(content)
        except GridLoadError as e:
            filename = os.path.basename(file_path)
            if e.line_number is not None:
                message = f"invalid grid data in {filename}:{e.line_number}: {e.message}"
            else:
                message = f"invalid grid data in {filename}: {e.message}"
            raise GridLoadError(message, e.line_number) from e

        logger.info("Loaded %s grid from %s", grid.size, file_path)
        return grid

    def load_from_directory(self, directory: str) -> List[Tuple[str, Grid]]:
        """Load all grid files from a directory"""
        if not os.path.isdir(directory):
            raise ValueError(f"Directory not found: {directory}")

        grids = []
        for filename in sorted(os.listdir(directory)):
            if valid_extension(filename):
                try:
                    grid = self.load_grid_file(os.path.join(directory, filename))
                    grids.append((filename, grid))
                except (OSError, ValueError, GridLoadError) as e:
                    logger.warning("Error loading %s: %s", filename, e)

        return grids

    def save_grid(self, grid: Grid, directory: Optional[str] = None) -> Path:
        """Save the grid's cells, returning the path that was written.

        The first save picks a new `grid-N` file; later saves overwrite it
        as long as it still exists.
        """
        if self.save_path is None or not self.save_path.exists():
            self.save_path = self._new_save_path(Path(directory or os.getcwd()))

        try:
            with open(self.save_path, "w", encoding="utf-8") as f:
                f.write(self.parser.serialize(grid))
        except PermissionError as e:
            raise GridSaveError("Permission denied") from e
        except OSError as e:
            raise GridSaveError("Save failed") from e

        logger.info("Saved grid to %s", self.save_path)
        return self.save_path

    def _new_save_path(self, directory: Path) -> Path:
        for index in range(1, MAX_SAVE_FILES + 1):
            path = directory / f"grid-{index}.{FILE_EXTENSION}"
            try:
                # Create the file exclusively so an existing grid is never overwritten
                with open(path, "x", encoding="utf-8"):
                    pass
            except FileExistsError:
                continue
            except PermissionError as e:
                raise GridSaveError("Permission denied") from e
            except OSError as e:
                raise GridSaveError("File saving error") from e
            return path

        raise GridSaveError("Too many grid files")
