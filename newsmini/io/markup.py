"""HTML-to-text helpers shared by the feed reader and the clue provider."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment

CHROME_TAGS = ("script", "style", "nav", "header", "footer")
SPACE_RE = re.compile(r"\s+")


def _text_of(soup: BeautifulSoup) -> str:
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    text = soup.get_text(separator=" ", strip=True)
    return SPACE_RE.sub(" ", text).strip()


def strip_markup(markup: str) -> str:
    """Drop tags and comments, unescape entities and collapse whitespace."""

    if not markup:
        return ""
    return _text_of(BeautifulSoup(markup, "html.parser"))


def extract_readable(markup: str, limit: int = 2000) -> str:
    """Body text of an article page without script/style/nav/header/footer."""

    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(CHROME_TAGS):
        tag.decompose()
    return _text_of(soup)[:limit]
