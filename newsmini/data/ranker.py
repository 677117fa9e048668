"""Candidate word extraction and ranking from story text."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence

from ..core.constants import LOCAL_SOURCE, PriorityTier
from ..core.models import CandidateWord, StoryRecord
from ..utils.logger import get_logger
from .lexicon import DEFAULT_STOPWORDS, DENY_LIST, NEWS_KEYWORDS
from .normalization import letter_runs, whitespace_tokens


LOGGER = get_logger(__name__)


@dataclass
class RankerConfig:
    """Token bounds and curated lists used by :class:`CandidateRanker`."""

    min_length: int = 3
    max_length: int = 8
    loose_min_length: int = 3
    loose_max_length: int = 6
    min_viable: int = 12
    local_source: str = LOCAL_SOURCE
    keywords: FrozenSet[str] = field(default_factory=lambda: NEWS_KEYWORDS)
    deny_list: FrozenSet[str] = field(default_factory=lambda: DENY_LIST)


class CandidateRanker:
    """Turns story titles and summaries into a ranked, attributed word list.

    Ranking precedence: local source first, curated news keyword first,
    title before summary, rarer before more frequent, then alphabetical.
    """

    def __init__(self, config: Optional[RankerConfig] = None) -> None:
        self.config = config or RankerConfig()

    def rank(
        self,
        stories: Sequence[StoryRecord],
        stopwords: Optional[Iterable[str]] = None,
    ) -> List[CandidateWord]:
        stop = {w.upper() for w in (stopwords if stopwords is not None else DEFAULT_STOPWORDS)}
        found: Dict[str, CandidateWord] = {}
        for story in stories:
            for tier, text in ((PriorityTier.TITLE, story.title), (PriorityTier.SUMMARY, story.summary)):
                for token in self._accepted(whitespace_tokens(text), stop, strict=True):
                    if token not in found:
                        found[token] = self._candidate(token, story, tier)

        self._count(found.values(), stories, whitespace_tokens)
        ranked = sorted(found.values(), key=CandidateWord.sort_key)
        LOGGER.info("Ranked %d candidate words from %d stories", len(ranked), len(stories))

        if len(ranked) < self.config.min_viable:
            extra = self._loose_scan(stories, stop, found)
            LOGGER.info(
                "Only %d candidates (< %d); loose re-scan added %d",
                len(ranked), self.config.min_viable, len(extra),
            )
            ranked.extend(extra)
        return ranked

    def _loose_scan(
        self,
        stories: Sequence[StoryRecord],
        stop: set,
        known: Dict[str, CandidateWord],
    ) -> List[CandidateWord]:
        extra: Dict[str, CandidateWord] = {}
        for story in stories:
            for token in self._accepted(letter_runs(story.text), stop, strict=False):
                if token not in known and token not in extra:
                    extra[token] = self._candidate(token, story, PriorityTier.LOOSE)
        self._count(extra.values(), stories, letter_runs)
        return list(extra.values())

    def _accepted(self, tokens: Iterator[str], stop: set, strict: bool) -> Iterator[str]:
        if strict:
            low, high = self.config.min_length, self.config.max_length
        else:
            low, high = self.config.loose_min_length, self.config.loose_max_length
        for token in tokens:
            if not (low <= len(token) <= high):
                continue
            if not token.isalpha() or token in stop or token in self.config.deny_list:
                continue
            yield token

    def _candidate(self, token: str, story: StoryRecord, tier: PriorityTier) -> CandidateWord:
        return CandidateWord(
            text=token,
            source_ref=story,
            priority=tier,
            is_local=story.source == self.config.local_source,
            is_keyword=token in self.config.keywords,
        )

    @staticmethod
    def _count(
        words: Iterable[CandidateWord],
        stories: Sequence[StoryRecord],
        tokenize: Callable[[str], Iterator[str]],
    ) -> None:
        # Same tokenizer as extraction; every candidate counts at least once.
        counts = Counter(token for story in stories for token in tokenize(story.text))
        for word in words:
            word.occurrence_count = counts[word.text]


def source_index(words: Iterable[CandidateWord]) -> Dict[str, StoryRecord]:
    """Map candidate text to the story it was first seen in."""

    return {word.text: word.source_ref for word in words if word.source_ref is not None}


def candidate_texts(words: Iterable[CandidateWord]) -> List[str]:
    return [word.text for word in words]
