from dataclasses import dataclass
from enum import Enum
from typing import Optional

MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 99  # clues are drawn with two characters


class CellKind(Enum):
    EMPTY = "empty"
    FILLED = "filled"
    MAYBED = "maybed"  # "what if" reasoning
    CROSSED = "crossed"  # certainly empty
    MEASURED = "measured"


@dataclass(frozen=True)
class Cell:
    """A single mark in the grid. Only measured cells carry an index."""
    kind: CellKind = CellKind.EMPTY
    index: Optional[int] = None

    @classmethod
    def measured(cls, index: Optional[int] = None) -> "Cell":
        return cls(CellKind.MEASURED, index)

    @classmethod
    def from_filled(cls, filled: bool) -> "Cell":
        return cls.FILLED if filled else cls.EMPTY

    def is_filled(self) -> bool:
        return self.kind is CellKind.FILLED

    def is_measured(self) -> bool:
        return self.kind is CellKind.MEASURED

    def matches(self, other: "Cell") -> bool:
        """Equality as seen by the fill tool: measured cells match regardless of index."""
        if self.is_measured() and other.is_measured():
            return True
        return self == other

    def __repr__(self) -> str:
        if self.is_measured():
            return f"Measured({self.index})"
        return self.kind.name.capitalize()


Cell.EMPTY = Cell(CellKind.EMPTY)
Cell.FILLED = Cell(CellKind.FILLED)
Cell.MAYBED = Cell(CellKind.MAYBED)
Cell.CROSSED = Cell(CellKind.CROSSED)


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    @classmethod
    def square(cls, length: int) -> "Size":
        return cls(length, length)

    def product(self) -> int:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def validate_size(size: Size) -> Size:
    """Raise ValueError if either dimension is outside the supported range"""
    for name, value in (("width", size.width), ("height", size.height)):
        if not MIN_GRID_SIZE <= value <= MAX_GRID_SIZE:
            raise ValueError(
                f"grid {name} must be in range {MIN_GRID_SIZE} to {MAX_GRID_SIZE}, got {value}"
            )
    return size
