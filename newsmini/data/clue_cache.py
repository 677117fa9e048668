"""Local clue cache.

Persists provider clues to a single JSON file so the same answer/story pair
is never sent to the LLM twice on the same day.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from pathlib import Path
from typing import Dict, Optional

from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_CACHE_PATH = Path("data/clue-cache.json")


class ClueCache:
    """Persist and reuse provider clues.

    Cache key strategy
    ------------------
    Key = ``{ANSWER}|{url_hash}|{YYYY-MM-DD}`` where ``url_hash`` is the first
    16 hex chars of the SHA-256 of the story URL. Keys expire naturally
    because the date is part of them.
    """

    def __init__(self, path: Path | str = DEFAULT_CACHE_PATH) -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def lookup(self, answer: str, source_url: str = "", day: Optional[date] = None) -> Optional[str]:
        clue = self._load().get(self.key(answer, source_url, day))
        if clue:
            LOGGER.debug("Clue cache hit: %s", answer)
        return clue

    def save(self, answer: str, source_url: str, clue: str, day: Optional[date] = None) -> None:
        doc = self._load()
        doc[self.key(answer, source_url, day)] = clue
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Clue cache write failed (%s): %s", self.path, exc)

    @staticmethod
    def key(answer: str, source_url: str = "", day: Optional[date] = None) -> str:
        url_hash = hashlib.sha256((source_url or "").encode("utf-8")).hexdigest()[:16]
        stamp = (day or date.today()).isoformat()
        return f"{answer.upper()}|{url_hash}|{stamp}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Clue cache read error (%s): %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}
