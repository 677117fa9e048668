"""Across/down slot extraction and standard crossword numbering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ..core.constants import GRID_SIZE, CellState, Direction
from ..core.models import Slot
from .template import GridTemplate


@dataclass(frozen=True)
class Numbering:
    """Number -> cell sequence per direction, plus cell index -> number."""

    across: Dict[int, Tuple[int, ...]] = field(default_factory=dict)
    down: Dict[int, Tuple[int, ...]] = field(default_factory=dict)
    numbers: Dict[int, int] = field(default_factory=dict)

    def slots(self) -> List[Slot]:
        """Across slots then down slots, each in ascending number order."""

        result = [
            Slot(number=num, direction=Direction.ACROSS, cells=cells)
            for num, cells in sorted(self.across.items())
        ]
        result.extend(
            Slot(number=num, direction=Direction.DOWN, cells=cells)
            for num, cells in sorted(self.down.items())
        )
        return result

    def for_direction(self, direction: Direction) -> Dict[int, Tuple[int, ...]]:
        return self.across if direction == Direction.ACROSS else self.down


def compute_numbering(pattern: Sequence[CellState], size: int = GRID_SIZE) -> Numbering:
    """Number run starts in row-major order.

    A cell gets a number when it is open and starts an across run or a down
    run. Only runs of two or more cells are registered as slots, but a
    single-cell run start still consumes a number.
    """

    across: Dict[int, Tuple[int, ...]] = {}
    down: Dict[int, Tuple[int, ...]] = {}
    numbers: Dict[int, int] = {}

    def is_open(row: int, col: int) -> bool:
        return pattern[row * size + col] == CellState.OPEN

    num = 0
    for r in range(size):
        for c in range(size):
            if not is_open(r, c):
                continue
            starts_across = c == 0 or not is_open(r, c - 1)
            starts_down = r == 0 or not is_open(r - 1, c)
            if not (starts_across or starts_down):
                continue
            num += 1
            numbers[r * size + c] = num

            if starts_across:
                cells = []
                cc = c
                while cc < size and is_open(r, cc):
                    cells.append(r * size + cc)
                    cc += 1
                if len(cells) > 1:
                    across[num] = tuple(cells)

            if starts_down:
                cells = []
                rr = r
                while rr < size and is_open(rr, c):
                    cells.append(rr * size + c)
                    rr += 1
                if len(cells) > 1:
                    down[num] = tuple(cells)

    return Numbering(across=across, down=down, numbers=numbers)


def numbering_for(template: GridTemplate) -> Numbering:
    """Authored numbering when the template lists slots, derived otherwise."""

    if not template.has_authored_slots:
        return compute_numbering(template.pattern, template.size)

    across: Dict[int, Tuple[int, ...]] = {}
    down: Dict[int, Tuple[int, ...]] = {}
    numbers: Dict[int, int] = {}
    for spec in template.slots or ():
        cells = spec.cells(template.size)
        target = across if spec.direction == Direction.ACROSS else down
        target[spec.number] = cells
        numbers.setdefault(cells[0], spec.number)
    return Numbering(across=across, down=down, numbers=numbers)


def resolve_slots(template: GridTemplate) -> List[Slot]:
    """Fill order for a template.

    Authored slots keep their listed order. Derived slots are across first,
    then down.
    """

    if template.has_authored_slots:
        return [
            Slot(number=spec.number, direction=spec.direction, cells=spec.cells(template.size))
            for spec in template.slots or ()
        ]
    return compute_numbering(template.pattern, template.size).slots()


def crossings(slots: Sequence[Slot]) -> Dict[str, List[Tuple[int, str, int]]]:
    """For each slot key, list (own position, other slot key, other position) per shared cell."""

    owners: Dict[int, List[Tuple[str, int]]] = {}
    for slot in slots:
        for pos, index in enumerate(slot.cells):
            owners.setdefault(index, []).append((slot.key, pos))

    result: Dict[str, List[Tuple[int, str, int]]] = {slot.key: [] for slot in slots}
    for positions in owners.values():
        if len(positions) < 2:
            continue
        for key_a, pos_a in positions:
            for key_b, pos_b in positions:
                if key_a != key_b:
                    result[key_a].append((pos_a, key_b, pos_b))
    return result


def has_crossings(slots: Sequence[Slot]) -> bool:
    return any(crossings(slots).values())
