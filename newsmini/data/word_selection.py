"""Word selection collaborators.

A selector proposes one answer per slot, in slot order. Anything that does
not match the slots' count and length profile is discarded by the builder,
which then falls back to the ranked candidate list.
"""

from __future__ import annotations

import os
from typing import Any, List, Optional, Protocol, Sequence

from ..core.models import Slot, StoryRecord
from ..io.gemini_client import GeminiAPIError, GeminiClient
from ..utils.logger import get_logger
from .normalization import clean_word


LOGGER = get_logger(__name__)


class WordSelector(Protocol):
    """Protocol implemented by all word selection providers."""

    def select(self, stories: Sequence[StoryRecord], slots: Sequence[Slot]) -> Optional[List[str]]:
        ...


def validate_selection(words: Optional[Sequence[str]], slots: Sequence[Slot]) -> Optional[List[str]]:
    """Return the cleaned words when they fit ``slots`` one-to-one, else ``None``."""

    if not words or len(words) != len(slots):
        return None
    cleaned = [clean_word(word) for word in words]
    for word, slot in zip(cleaned, slots):
        if len(word) != slot.length:
            return None
    if len(set(cleaned)) != len(cleaned):
        return None
    return cleaned


class StaticWordSelector:
    """Returns a fixed word list, e.g. one read from a file."""

    def __init__(self, words: Sequence[str]) -> None:
        self.words = [clean_word(word) for word in words]

    def select(self, stories: Sequence[StoryRecord], slots: Sequence[Slot]) -> Optional[List[str]]:
        return list(self.words)


class GeminiWordSelector:
    """LLM-powered selector using the Gemini API."""

    PROMPT = (
        "You are building a daily 5x5 news mini crossword for a public radio site.\n"
        "Pick exactly {count} different English words drawn from or strongly tied to "
        "the stories below, one for each slot, with these exact lengths in order: {lengths}.\n"
        "Words must be common, uppercase A-Z only, no abbreviations or proper names of people.\n"
        "Return a SINGLE JSON object: {{\"words\": [\"WORD\", ...]}}\n"
        "Stories:\n"
        "{stories}"
    )

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        enabled: Optional[bool] = None,
        enabled_env: str = "LLM_ENABLED",
        max_stories: int = 5,
    ) -> None:
        if enabled is None:
            enabled = os.environ.get(enabled_env, "").strip().lower() == "true"
        self.max_stories = max_stories
        self._client = client
        if enabled and self._client is None:
            try:
                self._client = GeminiClient.from_env()
            except RuntimeError as exc:
                LOGGER.warning("LLM word selection disabled: %s", exc)
                enabled = False
        self.enabled = bool(enabled)

    def select(self, stories: Sequence[StoryRecord], slots: Sequence[Slot]) -> Optional[List[str]]:
        if not self.enabled or self._client is None or not slots:
            return None
        prompt = self._render_prompt(stories, slots)
        try:
            data = self._client.generate_json(prompt, temperature=0.4, max_output_tokens=200)
        except GeminiAPIError as exc:
            LOGGER.warning("Word selection failed: %s", exc)
            return None
        words = self._words_from(data)
        LOGGER.info("Gemini proposed %d words: %s", len(words), ", ".join(words))
        return words or None

    def _render_prompt(self, stories: Sequence[StoryRecord], slots: Sequence[Slot]) -> str:
        lines = []
        for story in list(stories)[: self.max_stories]:
            summary = f" - {story.summary}" if story.summary else ""
            lines.append(f"* {story.title}{summary}")
        return self.PROMPT.format(
            count=len(slots),
            lengths=", ".join(str(slot.length) for slot in slots),
            stories="\n".join(lines) or "(no stories)",
        )

    @staticmethod
    def _words_from(data: Any) -> List[str]:
        words = data.get("words", []) if isinstance(data, dict) else data
        if not isinstance(words, list):
            return []
        return [clean_word(word) for word in words if isinstance(word, str)]
