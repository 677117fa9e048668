"""Shared constants and enumerations for the mini crossword engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


GRID_SIZE = 5
BLOCK_MARKER = "#"
OPEN_MARKER = "."
DEFAULT_FILL_LETTER = "A"
BLANK_MARKER = "___"
LOCAL_SOURCE = "wfdd"


class CellState(str, Enum):
    """Template cell states."""

    OPEN = "OPEN"
    BLOCKED = "BLOCKED"


class Direction(str, Enum):
    """Word directions supported by the grid."""

    ACROSS = "ACROSS"
    DOWN = "DOWN"


class PriorityTier(IntEnum):
    """Where a candidate word was first seen; lower is preferred."""

    TITLE = 1
    SUMMARY = 2
    LOOSE = 3


class SolveStatus(str, Enum):
    """Outcome of a constraint search."""

    SOLVED = "SOLVED"
    UNSATISFIABLE = "UNSATISFIABLE"
    EXHAUSTED = "EXHAUSTED"


@dataclass(frozen=True)
class Bounds:
    """Simple square bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


GRID_BOUNDS = Bounds(rows=GRID_SIZE, cols=GRID_SIZE)
