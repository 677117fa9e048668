"""News mini crossword generator: 5x5 puzzles built from the day's stories.

This package exposes the public API surface via:

- ``newsmini.engine.builder.PuzzleBuilder``: orchestrates template, fill and clues.
- ``newsmini.data.ranker.CandidateRanker``: ranks candidate words from stories.
- ``newsmini.io`` helpers: feed reading, Gemini clues and puzzle storage.
"""

from .core.models import PuzzleDocument, StoryRecord
from .engine.builder import BuilderConfig, BuildResult, PuzzleBuilder
from .data.ranker import CandidateRanker, RankerConfig

__all__ = [
    "PuzzleBuilder",
    "BuilderConfig",
    "BuildResult",
    "PuzzleDocument",
    "StoryRecord",
    "CandidateRanker",
    "RankerConfig",
]

__version__ = "0.1.0"
