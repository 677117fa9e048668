"""Mutable letter grid used while solving and filling."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Set

from ..core.constants import BLOCK_MARKER
from ..core.exceptions import SlotPlacementError
from ..core.models import Slot
from ..utils.logger import get_logger
from .template import GridTemplate


LOGGER = get_logger(__name__)


class FillGrid:
    """Per-index letters for one construction run.

    Each open cell remembers which slots currently own it, so removing a
    word only clears cells that no other placed slot still covers.
    """

    def __init__(self, template: GridTemplate) -> None:
        self.template = template
        self.letters: List[Optional[str]] = [None] * (template.size * template.size)
        self._owners: List[Set[str]] = [set() for _ in self.letters]
        self.assignments: Dict[str, str] = {}
        self.used_words: Set[str] = set()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def letter(self, index: int) -> Optional[str]:
        return self.letters[index]

    def pattern_for(self, slot: Slot) -> List[Optional[str]]:
        return [self.letters[index] for index in slot.cells]

    def conflicts(self, slot: Slot, word: str) -> List[int]:
        """Cell indices whose current letter disagrees with ``word``."""

        return [
            index
            for index, char in zip(slot.cells, word)
            if self.letters[index] is not None and self.letters[index] != char
        ]

    def fits(self, slot: Slot, word: str) -> bool:
        return len(word) == slot.length and not self.conflicts(slot, word)

    def can_place(self, slot: Slot, word: str) -> bool:
        return word not in self.used_words and self.fits(slot, word)

    def empty_open_cells(self) -> List[int]:
        return [
            index
            for index in self.template.open_indices()
            if not self.letters[index]
        ]

    def is_complete(self) -> bool:
        return not self.empty_open_cells()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place_word(self, slot: Slot, word: str, overwrite: bool = False) -> List[int]:
        """Write ``word`` into ``slot`` and return the cells it overwrote."""

        if len(word) != slot.length:
            raise SlotPlacementError(
                f"Word '{word}' does not fit slot {slot.key} of length {slot.length}"
            )
        clashes = self.conflicts(slot, word)
        if clashes and not overwrite:
            raise SlotPlacementError(f"Word '{word}' clashes with slot {slot.key} at {clashes}")

        for index, char in zip(slot.cells, word):
            self.letters[index] = char
            self._owners[index].add(slot.key)
        self.assignments[slot.key] = word
        self.used_words.add(word)
        return clashes

    def remove_word(self, slot: Slot) -> None:
        word = self.assignments.pop(slot.key, None)
        if word is None:
            return
        if word not in self.assignments.values():
            self.used_words.discard(word)
        for index in slot.cells:
            owners = self._owners[index]
            owners.discard(slot.key)
            if not owners:
                self.letters[index] = None

    def place_word_undoable(self, slot: Slot, word: str) -> Callable[[], None]:
        """Place a word and return an undo callable for backtracking."""

        self.place_word(slot, word)

        def undo() -> None:
            self.remove_word(slot)

        return undo

    def fill_empty(self, letter: str) -> int:
        """Write ``letter`` into every empty open cell; return how many were filled."""

        empty = self.empty_open_cells()
        for index in empty:
            self.letters[index] = letter
        if empty:
            LOGGER.debug("Filled %d empty open cells with '%s'", len(empty), letter)
        return len(empty)

    def clear(self) -> None:
        self.letters = [None] * len(self.letters)
        self._owners = [set() for _ in self.letters]
        self.assignments.clear()
        self.used_words.clear()

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_flat(self) -> List[str]:
        """Row-major letters with the block marker for blocked cells ("" if unfilled)."""

        return [
            (self.letters[index] or "") if self.template.is_open(index) else BLOCK_MARKER
            for index in range(len(self.letters))
        ]

    def apply(self, slots: Sequence[Slot], words: Dict[str, str]) -> None:
        """Place a complete, already-consistent assignment keyed by slot key."""

        for slot in slots:
            word = words.get(slot.key)
            if word:
                self.place_word(slot, word)
