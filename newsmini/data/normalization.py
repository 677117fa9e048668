"""Shared helpers for token normalization."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator

NON_LETTER_RE = re.compile(r"[^A-Z]")
LETTER_RUN_RE = re.compile(r"[A-Za-z]+")


def clean_word(text: str) -> str:
    """Return an uppercase ASCII-letters-only form of ``text``."""

    if not text:
        return ""
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return NON_LETTER_RE.sub("", ascii_text.upper())


def whitespace_tokens(text: str) -> Iterator[str]:
    """Split on whitespace and normalize each piece."""

    for raw in (text or "").split():
        token = clean_word(raw)
        if token:
            yield token


def letter_runs(text: str) -> Iterator[str]:
    """Split on anything that is not a letter; looser than :func:`whitespace_tokens`."""

    ascii_text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    for match in LETTER_RUN_RE.finditer(ascii_text):
        yield match.group(0).upper()


def whole_word_pattern(word: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


def contains_whole_word(text: str, word: str) -> bool:
    return bool(word) and bool(whole_word_pattern(word).search(text or ""))


__all__ = [
    "clean_word",
    "whitespace_tokens",
    "letter_runs",
    "whole_word_pattern",
    "contains_whole_word",
]
