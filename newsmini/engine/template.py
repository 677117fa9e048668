"""Fixed 5x5 grid templates and their optional authored slot lists."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.constants import (
    BLOCK_MARKER,
    GRID_BOUNDS,
    GRID_SIZE,
    OPEN_MARKER,
    CellState,
    Direction,
)
from ..core.exceptions import TemplateError


@dataclass(frozen=True)
class SlotSpec:
    """An authored slot: number, direction, start cell and length."""

    number: int
    direction: Direction
    row: int
    col: int
    length: int

    def cells(self, size: int = GRID_SIZE) -> Tuple[int, ...]:
        if self.direction == Direction.ACROSS:
            return tuple(self.row * size + self.col + i for i in range(self.length))
        return tuple((self.row + i) * size + self.col for i in range(self.length))


@dataclass(frozen=True)
class GridTemplate:
    """A fixed blocked/open pattern, optionally with an authored slot list."""

    name: str
    pattern: Tuple[CellState, ...]
    slots: Optional[Tuple[SlotSpec, ...]] = None
    size: int = GRID_SIZE

    def __post_init__(self) -> None:
        if self.size != GRID_SIZE:
            raise TemplateError(f"Template '{self.name}' must be {GRID_SIZE}x{GRID_SIZE}")
        if len(self.pattern) != self.size * self.size:
            raise TemplateError(
                f"Template '{self.name}' has {len(self.pattern)} cells, expected {self.size * self.size}"
            )
        if self.slots is not None:
            self._check_slots(self.slots)

    @classmethod
    def from_rows(
        cls,
        name: str,
        rows: Sequence[str],
        slots: Optional[Iterable[SlotSpec]] = None,
    ) -> "GridTemplate":
        """Build a template from row strings using ``.`` (open) and ``#`` (blocked)."""

        pattern: List[CellState] = []
        for row in rows:
            for char in row.strip():
                if char == OPEN_MARKER:
                    pattern.append(CellState.OPEN)
                elif char == BLOCK_MARKER:
                    pattern.append(CellState.BLOCKED)
                else:
                    raise TemplateError(f"Unknown template character {char!r} in '{name}'")
        return cls(name=name, pattern=tuple(pattern), slots=tuple(slots) if slots is not None else None)

    @property
    def has_authored_slots(self) -> bool:
        return self.slots is not None

    def is_open(self, index: int) -> bool:
        return self.pattern[index] == CellState.OPEN

    def open_indices(self) -> List[int]:
        return [i for i, state in enumerate(self.pattern) if state == CellState.OPEN]

    def _check_slots(self, slots: Sequence[SlotSpec]) -> None:
        seen = set()
        for spec in slots:
            if spec.length < 2:
                raise TemplateError(f"Slot {spec.number} {spec.direction.value} is shorter than 2")
            end_row = spec.row + (spec.length - 1 if spec.direction == Direction.DOWN else 0)
            end_col = spec.col + (spec.length - 1 if spec.direction == Direction.ACROSS else 0)
            if not (GRID_BOUNDS.contains(spec.row, spec.col) and GRID_BOUNDS.contains(end_row, end_col)):
                raise TemplateError(f"Slot {spec.number} {spec.direction.value} leaves the grid")
            for index in spec.cells(self.size):
                if not self.is_open(index):
                    raise TemplateError(
                        f"Slot {spec.number} {spec.direction.value} covers blocked cell {index}"
                    )
            key = (spec.number, spec.direction)
            if key in seen:
                raise TemplateError(f"Duplicate slot {spec.number} {spec.direction.value}")
            seen.add(key)


MINI = GridTemplate.from_rows(
    "mini",
    [
        ".....",
        ".#...",
        ".....",
        "...#.",
        ".....",
    ],
)

CORNERS = GridTemplate.from_rows(
    "corners",
    [
        "#....",
        ".....",
        ".....",
        ".....",
        "....#",
    ],
)

LADDER = GridTemplate.from_rows(
    "ladder",
    [
        ".....",
        ".#.#.",
        ".....",
        ".#.#.",
        ".....",
    ],
)

# Three independent across entries; numbering is authored.
STRIPES = GridTemplate.from_rows(
    "stripes",
    [
        ".....",
        "#####",
        ".....",
        "#####",
        ".....",
    ],
    slots=[
        SlotSpec(1, Direction.ACROSS, 0, 0, 5),
        SlotSpec(2, Direction.ACROSS, 2, 0, 5),
        SlotSpec(3, Direction.ACROSS, 4, 0, 5),
    ],
)

TEMPLATES: Dict[str, GridTemplate] = {
    template.name: template for template in (MINI, CORNERS, LADDER, STRIPES)
}
DEFAULT_TEMPLATE = MINI


def get_template(name: str) -> GridTemplate:
    try:
        return TEMPLATES[name]
    except KeyError as exc:
        raise TemplateError(
            f"Unknown template '{name}' (known: {sorted(TEMPLATES)})"
        ) from exc


def choose_template(
    rng: Optional[random.Random] = None,
    names: Optional[Sequence[str]] = None,
) -> GridTemplate:
    """Pick a template with the supplied random source (deterministic for a seeded rng)."""

    pool = sorted(names) if names else sorted(TEMPLATES)
    if not pool:
        raise TemplateError("No templates to choose from")
    rng = rng or random.Random()
    return get_template(rng.choice(pool))
