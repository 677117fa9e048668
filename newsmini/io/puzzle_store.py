"""Persistent puzzle document store.

Every finished puzzle is saved as ``<date>.json`` under the output
directory (``public/puzzles`` by default), ready for the front end.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ..core.models import PuzzleDocument
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("public/puzzles")


class PuzzleStore:
    """Write puzzle documents as pretty-printed JSON files."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)

    def path_for(self, document: PuzzleDocument) -> Path:
        return self.store_dir / f"{document.date}.json"

    def save(self, document: PuzzleDocument) -> Path:
        """Persist ``document`` and return the written path."""
        self.store_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(document)
        path.write_text(json.dumps(document.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.info("Puzzle saved: %s", path)
        return path

    def load(self, day: str) -> Optional[dict]:
        path = self.store_dir / f"{day}.json"
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))
