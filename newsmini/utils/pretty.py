"""Pretty-print helpers for mini crossword grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Sequence

from ..core.constants import BLOCK_MARKER, GRID_SIZE, OPEN_MARKER

if TYPE_CHECKING:
    from ..core.models import PuzzleDocument
    from ..engine.builder import BuildResult


def cell_symbol(value: str) -> str:
    if value == BLOCK_MARKER:
        return BLOCK_MARKER
    return value or OPEN_MARKER


def format_grid(grid: Sequence[str], size: int = GRID_SIZE) -> str:
    header_cells = [f"{c:>2}" for c in range(size)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * size - 1))
    for r in range(size):
        row_cells = [cell_symbol(grid[r * size + c]) for c in range(size)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_clues(document: PuzzleDocument) -> str:
    lines = ["ACROSS"]
    lines.extend(f"  {num:>2}. {text}" for num, text in sorted(document.clues_across.items()))
    lines.append("DOWN")
    lines.extend(f"  {num:>2}. {text}" for num, text in sorted(document.clues_down.items()))
    return "\n".join(lines)


def print_puzzle(result: BuildResult, *, stream=None) -> None:
    """Print grid, clues and build stats for a finished puzzle."""

    stream = stream or sys.stdout
    document = result.document
    print(f"{document.title} ({document.date})", file=stream)
    print(format_grid(document.grid, document.size), file=stream)
    print(file=stream)
    print(format_clues(document), file=stream)

    print(file=stream)
    print("--- Build ---", file=stream)
    print(f"  Template:      {result.template.name}", file=stream)
    print(f"  Slots:         {len(result.slots)}", file=stream)
    print(f"  Solver:        {result.status.value.lower()}", file=stream)
    print(f"  Fallback fill: {'yes' if result.used_fallback else 'no'}", file=stream)
    if result.validation_messages:
        print(file=stream)
        print("--- Validation ---", file=stream)
        for msg in result.validation_messages:
            print(f"  {msg}", file=stream)
