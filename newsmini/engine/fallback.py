"""Deterministic best-effort grid completion from a curated vocabulary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_FILL_LETTER
from ..core.models import Slot
from ..utils.logger import get_logger
from .grid import FillGrid
from .template import GridTemplate


LOGGER = get_logger(__name__)


FALLBACK_WORDS: Dict[int, List[str]] = {
    3: ["AIR", "NPR", "WIN", "MAP", "ART", "BUS", "FAN", "SUN", "LAW", "TAX"],
    4: ["CITY", "NEWS", "PARK", "TOWN", "FARM", "RAIN", "MAIL", "SHOW", "ROAD", "BOOK"],
    5: ["RIVER", "RADIO", "STORM", "MUSIC", "TRAIN", "COURT", "FIELD", "BOARD", "MAYOR", "CROWD"],
    6: ["SCHOOL", "MARKET", "SEASON", "COUNTY", "BRIDGE", "GARDEN"],
    7: ["LIBRARY", "COUNCIL", "WEATHER", "CONCERT", "STATION"],
    8: ["HEADLINE", "FESTIVAL", "BASEBALL", "HOSPITAL"],
}

PLACEHOLDER_STEMS = ("NEWS", "TRIAD", "LOCAL", "EVENT")


@dataclass
class FallbackResult:
    grid: FillGrid
    assignments: Dict[str, str] = field(default_factory=dict)
    overwrites: Dict[str, List[int]] = field(default_factory=dict)
    placeholders: List[str] = field(default_factory=list)
    filled_cells: int = 0


def synthesize_placeholder(length: int, pattern: Sequence[Optional[str]], seq: int = 0) -> str:
    """Pad a generated stem to ``length``, keeping letters already in the slot."""

    stem = PLACEHOLDER_STEMS[seq % len(PLACEHOLDER_STEMS)][:length]
    token = stem.ljust(length, DEFAULT_FILL_LETTER)
    return "".join(existing or char for existing, char in zip(pattern, token))


class FallbackFiller:
    """Greedy slot-order fill that always yields a fully lettered grid.

    No backtracking happens here. Each slot takes the first unused word of
    the right length; where it disagrees with letters already written, the
    earlier cells are overwritten.
    """

    def __init__(
        self,
        vocabulary: Optional[Mapping[int, Iterable[str]]] = None,
        fill_letter: str = DEFAULT_FILL_LETTER,
    ) -> None:
        source = vocabulary if vocabulary is not None else FALLBACK_WORDS
        self.vocabulary: Dict[int, List[str]] = {
            length: [w.upper() for w in words if len(w) == length and w.isalpha()]
            for length, words in source.items()
        }
        self.fill_letter = fill_letter

    def fill(
        self,
        template: GridTemplate,
        slots: Sequence[Slot],
        pool: Iterable[str] = (),
    ) -> FallbackResult:
        grid = FillGrid(template)
        result = FallbackResult(grid=grid)
        ranked = [w for w in dict.fromkeys(pool) if w]

        for slot in slots:
            choices = [w for w in ranked if len(w) == slot.length]
            choices.extend(w for w in self.vocabulary.get(slot.length, []) if w not in choices)
            unused = [w for w in choices if w not in grid.used_words]

            if unused:
                word = unused[0]
                clashes = grid.conflicts(slot, word)
                if clashes:
                    LOGGER.warning(
                        "Fallback: '%s' clashes in slot %s; overwriting %s",
                        word, slot.key, clashes,
                    )
            else:
                word = synthesize_placeholder(
                    slot.length, grid.pattern_for(slot), seq=len(result.placeholders)
                )
                result.placeholders.append(slot.key)
                LOGGER.warning("Fallback: placeholder '%s' for slot %s", word, slot.key)

            clashes = grid.place_word(slot, word, overwrite=True)
            if clashes:
                result.overwrites[slot.key] = clashes
            result.assignments[slot.key] = word

        result.filled_cells = grid.fill_empty(self.fill_letter)
        LOGGER.info(
            "Fallback fill: %d slots, %d overwrites, %d placeholders, %d default letters",
            len(slots), len(result.overwrites), len(result.placeholders), result.filled_cells,
        )
        return result
