"""Data models supporting the mini crossword engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .constants import GRID_SIZE, LOCAL_SOURCE, Direction, PriorityTier


@dataclass(frozen=True)
class StoryRecord:
    """A news story supplied by a feed reader."""

    title: str
    summary: str = ""
    link: str = ""
    source: str = ""

    @property
    def is_local(self) -> bool:
        return self.source == LOCAL_SOURCE

    @property
    def text(self) -> str:
        return f"{self.title} {self.summary}"


@dataclass(frozen=True)
class Slot:
    """A fillable run of open cells in one direction."""

    number: int
    direction: Direction
    cells: Tuple[int, ...]

    @property
    def length(self) -> int:
        return len(self.cells)

    @property
    def key(self) -> str:
        return f"{self.number}-{self.direction.value}"


@dataclass
class CandidateWord:
    """A ranked, source-attributed word eligible for placement."""

    text: str
    source_ref: Optional[StoryRecord]
    priority: PriorityTier
    occurrence_count: int = 0
    is_local: bool = False
    is_keyword: bool = False

    def sort_key(self) -> Tuple[bool, bool, int, int, str]:
        return (
            not self.is_local,
            not self.is_keyword,
            int(self.priority),
            self.occurrence_count,
            self.text,
        )


@dataclass(frozen=True)
class PuzzleDocument:
    """The final puzzle handed to a writer. Immutable once assembled."""

    id: str
    date: str
    title: str
    grid: Tuple[str, ...]
    clues_across: Dict[int, str] = field(default_factory=dict)
    clues_down: Dict[int, str] = field(default_factory=dict)
    source_urls: Tuple[str, ...] = ()
    size: int = GRID_SIZE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "size": self.size,
            "grid": list(self.grid),
            "clues": {
                "across": {str(num): text for num, text in sorted(self.clues_across.items())},
                "down": {str(num): text for num, text in sorted(self.clues_down.items())},
            },
            "meta": {"source_urls": list(self.source_urls[:5])},
        }
