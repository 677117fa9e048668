"""LLM clue provider backed by Gemini, with article context and a clue cache."""

from __future__ import annotations

import asyncio
import os
from datetime import date
from typing import Optional

import requests

from ..core.exceptions import ClueProviderError
from ..data.clue_cache import ClueCache
from ..engine.clues import sanitize_clue
from ..utils.logger import get_logger
from .gemini_client import GeminiAPIError, GeminiClient
from .markup import extract_readable


LOGGER = get_logger(__name__)


class GeminiClueProvider:
    """Clue provider used by :class:`~newsmini.engine.clues.ClueAssembler`.

    Enabled only when ``LLM_ENABLED`` is ``"true"`` and a Gemini key is
    available. Blocking HTTP work runs in a worker thread so two calls can
    be in flight at once.
    """

    SYSTEM_PROMPT = (
        "You write fair, succinct crossword clues for a daily 5x5 \"mini\" puzzle "
        "for a public radio site.\n"
        "Rules:\n"
        "- Max {max_length} characters.\n"
        "- No quotations, no punctuation at the end.\n"
        "- Do NOT include or spell the answer or obvious anagrams.\n"
        "- Keep neutral, local-civic tone."
    )

    USER_PROMPT = (
        "Answer: {answer}\n"
        "Story title: {title}\n"
        "Context (trimmed article text):\n"
        "{article}\n"
        "Write ONE clue (<={max_length} chars) that points to the answer without revealing it."
    )

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        cache: Optional[ClueCache] = None,
        enabled: Optional[bool] = None,
        enabled_env: str = "LLM_ENABLED",
        fetch_articles: bool = True,
        article_timeout: float = 5.0,
        max_length: int = 60,
        session: Optional[requests.Session] = None,
        today: Optional[date] = None,
    ) -> None:
        if enabled is None:
            enabled = os.environ.get(enabled_env, "").strip().lower() == "true"
        self.cache = cache
        self.fetch_articles = fetch_articles
        self.article_timeout = article_timeout
        self.max_length = max_length
        self.today = today
        self._session = session or requests.Session()
        self._client = client
        if enabled and self._client is None:
            try:
                self._client = GeminiClient.from_env()
            except RuntimeError as exc:
                LOGGER.warning("LLM clues disabled: %s", exc)
                enabled = False
        self.enabled = bool(enabled)

    async def generate(self, answer: str, source_title: str, source_url: str) -> Optional[str]:
        if not self.enabled or self._client is None:
            return None

        answer = answer.upper()
        if self.cache is not None:
            cached = await asyncio.to_thread(self.cache.lookup, answer, source_url, self.today)
            if cached:
                return cached

        article = ""
        if self.fetch_articles and source_url:
            article = await asyncio.to_thread(self.fetch_article, source_url)

        try:
            text = await asyncio.to_thread(
                self._client.generate_text,
                self.render_prompt(answer, source_title, article),
                system_instruction=self.SYSTEM_PROMPT.format(max_length=self.max_length),
                temperature=0.5,
                max_output_tokens=50,
            )
        except GeminiAPIError as exc:
            raise ClueProviderError(f"Gemini clue for {answer} failed: {exc}") from exc
        clue = sanitize_clue(text, self.max_length)
        if not clue:
            return None
        if self.cache is not None:
            await asyncio.to_thread(self.cache.save, answer, source_url, clue, self.today)
        return clue

    def render_prompt(self, answer: str, source_title: str, article: str) -> str:
        return self.USER_PROMPT.format(
            answer=answer.upper(),
            title=source_title or "WFDD coverage",
            article=article or "(no extract)",
            max_length=self.max_length,
        )

    def fetch_article(self, url: str) -> str:
        """Best-effort article text; empty string on any HTTP failure."""

        try:
            response = self._session.get(url, timeout=self.article_timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.debug("Article fetch failed for %s: %s", url, exc)
            return ""
        return extract_readable(response.text)
