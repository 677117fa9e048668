"""Clue assembly: budgeted provider calls with a heuristic fallback."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.constants import BLANK_MARKER, Direction
from ..core.models import StoryRecord
from ..data.normalization import contains_whole_word, whole_word_pattern
from ..utils.logger import get_logger
from .numbering import Numbering


LOGGER = get_logger(__name__)

ELLIPSIS = "..."

FALLBACK_CLUES: Dict[str, str] = {
    "RIVER": "Flows through the Triad",
    "RADIO": "WFDD medium",
    "WFDD": "Local public radio",
    "CITY": "Urban area in coverage",
    "NEWS": "What WFDD reports",
    "PARK": "Green space",
    "AIR": "Radio waves travel through this",
    "NPR": "Public radio network",
    "WIN": "Victory",
    "STORM": "Thunder and lightning event",
    "MUSIC": "What a concert hall fills with",
    "MAYOR": "City hall leader",
    "COURT": "Where a judge presides",
    "TOWN": "Small municipality",
    "RAIN": "Forecast for umbrellas",
    "SCHOOL": "Classroom building",
    "LIBRARY": "Place to borrow books",
}

DEFAULT_CLUES: Tuple[str, ...] = ("In today's coverage", "Word in the news")

SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
PROPER_PHRASE_RE = re.compile(r"\b[A-Z][\w'-]*(?:\s+[A-Z][\w'-]*){1,3}\b")
WRAPPING_QUOTES = "\"'“”‘’"


@dataclass
class ClueConfig:
    """Provider budget and display limits."""

    call_budget: int = 8
    batch_size: int = 2
    call_timeout: float = 5.0
    max_length: int = 60


@dataclass
class ClueEntry:
    number: int
    direction: Direction
    answer: str
    source_title: str = ""
    source_url: str = ""


class ClueProvider(Protocol):
    """External clue-text collaborator. Must tolerate two concurrent calls."""

    enabled: bool

    async def generate(self, answer: str, source_title: str, source_url: str) -> Optional[str]:
        ...


class CallBudget:
    """Global cap on provider calls, shared by the across and down phases."""

    def __init__(self, limit: int) -> None:
        self.limit = max(0, limit)
        self.used = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    def try_acquire(self) -> bool:
        if self.used >= self.limit:
            return False
        self.used += 1
        return True


def sanitize_clue(text: Optional[str], max_length: int = 60) -> str:
    """One line, no wrapping quotes, no trailing sentence punctuation, bounded length."""

    if not text:
        return ""
    clue = re.sub(r"[\r\n]+", " ", text).strip()
    clue = clue.strip(WRAPPING_QUOTES).strip()
    clue = re.sub(r"[.?!]\s*$", "", clue)
    return clue[:max_length].strip()


class HeuristicClueWriter:
    """Deterministic clues built from the stories behind the puzzle."""

    def __init__(
        self,
        stories: Sequence[StoryRecord] = (),
        max_length: int = 60,
        fallback_clues: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.stories = list(stories)
        self.max_length = max_length
        self.fallback_clues = dict(FALLBACK_CLUES if fallback_clues is None else fallback_clues)

    def clue(self, answer: str) -> str:
        answer = answer.upper()
        for sentence in self._sentences():
            if not contains_whole_word(sentence, answer):
                continue
            candidate = self._fill_in_blank(sentence, answer)
            if candidate and not contains_whole_word(candidate, answer):
                return candidate

        curated = self.fallback_clues.get(answer)
        if curated and not contains_whole_word(curated, answer):
            return curated
        for default in DEFAULT_CLUES:
            if not contains_whole_word(default, answer):
                return default
        return f"({len(answer)})"

    def _sentences(self) -> List[str]:
        titles = [story.title.strip() for story in self.stories if story.title.strip()]
        summaries: List[str] = []
        for story in self.stories:
            summaries.extend(
                part.strip() for part in SENTENCE_SPLIT_RE.split(story.summary or "") if part.strip()
            )
        return titles + summaries

    def _fill_in_blank(self, sentence: str, answer: str) -> str:
        text = sentence
        if not self._is_title_case(sentence):
            for match in PROPER_PHRASE_RE.finditer(sentence):
                if contains_whole_word(match.group(0), answer):
                    text = sentence[:match.start()] + BLANK_MARKER + sentence[match.end():]
                    break
        text = whole_word_pattern(answer).sub(BLANK_MARKER, text)
        return self._truncate(" ".join(text.split()))

    @staticmethod
    def _is_title_case(sentence: str) -> bool:
        words = [w for w in sentence.split() if w[:1].isalpha()]
        if not words:
            return False
        capitalized = sum(1 for w in words if w[0].isupper())
        return capitalized / len(words) >= 0.6

    def _truncate(self, text: str) -> str:
        if len(text) <= self.max_length:
            return text
        budget = self.max_length - len(ELLIPSIS)
        pos = text.find(BLANK_MARKER)
        if pos == -1 or pos + len(BLANK_MARKER) <= budget:
            return text[:budget].rstrip() + ELLIPSIS
        window = self.max_length - 2 * len(ELLIPSIS)
        start = max(0, min(pos - window // 2, len(text) - window))
        return ELLIPSIS + text[start:start + window].strip() + ELLIPSIS


class ClueAssembler:
    """Maps every numbered slot's answer to clue text.

    Across entries are resolved before down entries. Provider calls go out
    two at a time, each batch awaited fully, and stop once the shared call
    budget is spent; anything without a provider clue gets a heuristic one.
    """

    def __init__(
        self,
        provider: Optional[ClueProvider] = None,
        heuristic: Optional[HeuristicClueWriter] = None,
        config: Optional[ClueConfig] = None,
    ) -> None:
        self.config = config or ClueConfig()
        self.provider = provider
        self.heuristic = heuristic or HeuristicClueWriter(max_length=self.config.max_length)
        self.budget = CallBudget(self.config.call_budget)

    @property
    def provider_enabled(self) -> bool:
        return self.provider is not None and bool(getattr(self.provider, "enabled", True))

    def entries(
        self,
        grid: Sequence[str],
        numbering: Numbering,
        attribution: Optional[Mapping[str, StoryRecord]] = None,
    ) -> Tuple[List[ClueEntry], List[ClueEntry]]:
        attribution = attribution or {}
        result: Dict[Direction, List[ClueEntry]] = {}
        for direction in (Direction.ACROSS, Direction.DOWN):
            entries = []
            for number, cells in sorted(numbering.for_direction(direction).items()):
                answer = "".join(grid[index] for index in cells)
                story = attribution.get(answer)
                entries.append(
                    ClueEntry(
                        number=number,
                        direction=direction,
                        answer=answer,
                        source_title=story.title if story else "",
                        source_url=story.link if story else "",
                    )
                )
            result[direction] = entries
        return result[Direction.ACROSS], result[Direction.DOWN]

    async def assemble(
        self,
        grid: Sequence[str],
        numbering: Numbering,
        attribution: Optional[Mapping[str, StoryRecord]] = None,
    ) -> Tuple[Dict[int, str], Dict[int, str]]:
        self.budget = CallBudget(self.config.call_budget)
        across_entries, down_entries = self.entries(grid, numbering, attribution)
        across = await self._resolve(across_entries)
        LOGGER.debug("Across clues done; %d provider calls left for down", self.budget.remaining)
        down = await self._resolve(down_entries)
        LOGGER.info(
            "Assembled %d across / %d down clues (%d provider calls)",
            len(across), len(down), self.budget.used,
        )
        return across, down

    async def _resolve(self, entries: Sequence[ClueEntry]) -> Dict[int, str]:
        results: Dict[int, str] = {}
        size = max(1, self.config.batch_size)
        for start in range(0, len(entries), size):
            batch = entries[start:start + size]
            clues = await asyncio.gather(*(self._clue_for(entry) for entry in batch))
            for entry, clue in zip(batch, clues):
                results[entry.number] = clue
        return results

    async def _clue_for(self, entry: ClueEntry) -> str:
        if self.provider_enabled and self.budget.try_acquire():
            LOGGER.info(
                "Requesting clue for %s (%d/%d)", entry.answer, self.budget.used, self.budget.limit
            )
            clue = await self._call_provider(entry)
            if clue:
                return clue
        return self.heuristic.clue(entry.answer)

    async def _call_provider(self, entry: ClueEntry) -> Optional[str]:
        if self.provider is None:
            return None
        try:
            raw = await asyncio.wait_for(
                self.provider.generate(entry.answer, entry.source_title, entry.source_url),
                timeout=self.config.call_timeout,
            )
        except asyncio.TimeoutError:
            LOGGER.warning("Clue provider timed out for %s", entry.answer)
            return None
        except Exception as exc:
            LOGGER.warning("Clue provider failed for %s: %s", entry.answer, exc)
            return None

        clue = sanitize_clue(raw, self.config.max_length)
        if not clue:
            LOGGER.debug("Clue provider returned nothing for %s", entry.answer)
            return None
        if contains_whole_word(clue, entry.answer):
            LOGGER.warning("Provider clue for %s reveals the answer; discarded", entry.answer)
            return None
        return clue
