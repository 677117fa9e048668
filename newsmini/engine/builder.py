"""Puzzle build orchestration.

Pipeline:
  1. Layout: pick a template and resolve its slots and numbering.
  2. Fill: solve the slots from the selected or ranked word pool, falling
     back to the curated filler when the search does not succeed.
  3. Clues: assemble across and down clues, then wrap everything in a
     :class:`PuzzleDocument`.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Sequence, Union

from ..core.constants import DEFAULT_FILL_LETTER, SolveStatus
from ..core.models import PuzzleDocument, Slot, StoryRecord
from ..data.ranker import CandidateRanker, RankerConfig, candidate_texts, source_index
from ..data.word_selection import WordSelector, validate_selection
from ..utils.logger import get_logger
from .clues import ClueAssembler, ClueConfig, ClueProvider, HeuristicClueWriter
from .fallback import FallbackFiller
from .grid import FillGrid
from .numbering import numbering_for, resolve_slots
from .solver import SolverConfig, solve_slots
from .template import GridTemplate, choose_template, get_template
from .validator import GridValidator


LOGGER = get_logger(__name__)

MAX_SOURCE_URLS = 5


@dataclass
class BuilderConfig:
    seed: Optional[int] = None
    template: Optional[str] = None
    title: str = "WFDD One-Minute Crossword"
    id_prefix: str = "wfdd-mini"
    stopwords: Optional[FrozenSet[str]] = None
    ranker: RankerConfig = field(default_factory=RankerConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    clues: ClueConfig = field(default_factory=ClueConfig)


@dataclass
class BuildResult:
    document: PuzzleDocument
    template: GridTemplate
    slots: List[Slot]
    status: SolveStatus
    used_fallback: bool = False
    assignments: Dict[str, str] = field(default_factory=dict)
    validation_messages: List[str] = field(default_factory=list)


class PuzzleBuilder:
    """High-level orchestrator: template, fill, clues, document."""

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        clue_provider: Optional[ClueProvider] = None,
        word_selector: Optional[WordSelector] = None,
        rng: Optional[random.Random] = None,
        fallback: Optional[FallbackFiller] = None,
    ) -> None:
        self.config = config or BuilderConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.clue_provider = clue_provider
        self.word_selector = word_selector
        self.ranker = CandidateRanker(self.config.ranker)
        self.fallback = fallback or FallbackFiller()
        self.validator = GridValidator()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    async def build(
        self,
        stories: Sequence[StoryRecord],
        template: Union[GridTemplate, str, None] = None,
        source_urls: Optional[Sequence[str]] = None,
        today: Optional[date] = None,
    ) -> BuildResult:
        stories = list(stories)
        template = self._resolve_template(template)
        slots = resolve_slots(template)
        numbering = numbering_for(template)
        LOGGER.info("Template '%s': %d slots", template.name, len(slots))

        ranked = self.ranker.rank(stories, self.config.stopwords)
        attribution = source_index(ranked)
        pool = self._word_pool(stories, slots, candidate_texts(ranked))

        grid = FillGrid(template)
        solved = solve_slots(grid, slots, pool, self.config.solver)
        used_fallback = not solved.solved
        if solved.solved:
            assignments = dict(solved.assignments)
            stray = grid.fill_empty(DEFAULT_FILL_LETTER)
            if stray:
                LOGGER.debug("Filled %d unslotted open cells", stray)
        else:
            LOGGER.warning("Solver %s; using fallback fill", solved.status.value.lower())
            filled = self.fallback.fill(template, slots, pool)
            grid = filled.grid
            assignments = dict(filled.assignments)

        letters = grid.to_flat()
        self.validator.ensure_complete(template, letters)
        validation = self.validator.validate(template, letters, slots, assignments)

        assembler = ClueAssembler(
            provider=self.clue_provider,
            heuristic=HeuristicClueWriter(stories, max_length=self.config.clues.max_length),
            config=self.config.clues,
        )
        across, down = await assembler.assemble(letters, numbering, attribution)

        day = (today or date.today()).isoformat()
        if source_urls is None:
            source_urls = [story.link for story in stories if story.link]
        document = PuzzleDocument(
            id=f"{self.config.id_prefix}-{day}",
            date=day,
            title=self.config.title,
            grid=tuple(letters),
            clues_across=across,
            clues_down=down,
            source_urls=tuple(source_urls[:MAX_SOURCE_URLS]),
            size=template.size,
        )
        LOGGER.info(
            "Built puzzle %s (%s%s)",
            document.id, solved.status.value.lower(), ", fallback" if used_fallback else "",
        )
        return BuildResult(
            document=document,
            template=template,
            slots=slots,
            status=solved.status,
            used_fallback=used_fallback,
            assignments=assignments,
            validation_messages=validation.messages,
        )

    def build_sync(
        self,
        stories: Sequence[StoryRecord],
        template: Union[GridTemplate, str, None] = None,
        source_urls: Optional[Sequence[str]] = None,
        today: Optional[date] = None,
    ) -> BuildResult:
        return asyncio.run(self.build(stories, template, source_urls, today))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve_template(self, template: Union[GridTemplate, str, None]) -> GridTemplate:
        if isinstance(template, GridTemplate):
            return template
        name = template or self.config.template
        if name:
            return get_template(name)
        return choose_template(self.rng)

    def _word_pool(
        self,
        stories: Sequence[StoryRecord],
        slots: Sequence[Slot],
        ranked: List[str],
    ) -> List[str]:
        if self.word_selector is None:
            return ranked
        try:
            proposed = self.word_selector.select(stories, slots)
        except Exception as exc:
            LOGGER.warning("Word selector failed: %s; using ranked candidates", exc)
            return ranked
        selected = validate_selection(proposed, slots)
        if selected is None:
            if proposed:
                LOGGER.warning(
                    "Word selector returned %d words not matching %d slots; using ranked candidates",
                    len(proposed), len(slots),
                )
            return ranked
        LOGGER.info("Using %d selected words", len(selected))
        return selected
