"""Deterministic structural validation for finished grids."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..core.constants import BLOCK_MARKER
from ..core.exceptions import GridIncompleteError
from ..core.models import Slot
from ..utils.logger import get_logger
from .template import GridTemplate


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str] = field(default_factory=list)


class GridValidator:
    """Checks a flat, row-major grid against its template.

    Structural problems (wrong length, unlettered open cell, bad block
    markers) are fatal. Crossing and uniqueness problems are only reported,
    since the fallback path is allowed to produce them.
    """

    def ensure_complete(self, template: GridTemplate, grid: Sequence[str]) -> None:
        """Raise :class:`GridIncompleteError` unless every open cell holds one letter."""

        expected = template.size * template.size
        if len(grid) != expected:
            raise GridIncompleteError(f"Grid has {len(grid)} cells, expected {expected}")
        for index, value in enumerate(grid):
            if template.is_open(index):
                if len(value) != 1 or not value.isalpha() or not value.isupper():
                    raise GridIncompleteError(f"Open cell {index} holds {value!r}")
            elif value != BLOCK_MARKER:
                raise GridIncompleteError(f"Blocked cell {index} holds {value!r}")

    def validate(
        self,
        template: GridTemplate,
        grid: Sequence[str],
        slots: Sequence[Slot],
        answers: dict,
    ) -> ValidationResult:
        messages: List[str] = []
        try:
            self.ensure_complete(template, grid)
        except GridIncompleteError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])

        messages.extend(self._check_answers_match(grid, slots, answers))
        messages.extend(self._check_no_duplicate_words(grid, slots))
        for message in messages:
            LOGGER.warning("Validation: %s", message)
        return ValidationResult(ok=not messages, messages=messages)

    @staticmethod
    def _check_answers_match(grid: Sequence[str], slots: Sequence[Slot], answers: dict) -> List[str]:
        problems = []
        for slot in slots:
            placed = answers.get(slot.key)
            if not placed:
                continue
            actual = "".join(grid[index] for index in slot.cells)
            if actual != placed:
                problems.append(f"Slot {slot.key} reads '{actual}' but '{placed}' was placed")
        return problems

    @staticmethod
    def _check_no_duplicate_words(grid: Sequence[str], slots: Sequence[Slot]) -> List[str]:
        problems = []
        seen = {}
        for slot in slots:
            text = "".join(grid[index] for index in slot.cells)
            if text in seen:
                problems.append(f"Duplicate word '{text}' in slots {seen[text]} and {slot.key}")
            else:
                seen[text] = slot.key
        return problems
