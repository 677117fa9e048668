"""Syndication feed reader producing :class:`StoryRecord` inputs."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import requests

from ..core.constants import LOCAL_SOURCE
from ..core.exceptions import FeedError
from ..core.models import StoryRecord
from ..utils.logger import get_logger
from .markup import strip_markup


LOGGER = get_logger(__name__)

WFDD_LOCAL = "https://www.wfdd.org/local.rss"
NPR_TOP = "https://www.wfdd.org/tags/npr-top-stories.rss"

ATOM_NS = "{http://www.w3.org/2005/Atom}"
CONTENT_ENCODED = "{http://purl.org/rss/1.0/modules/content/}encoded"


@dataclass(frozen=True)
class FeedSpec:
    url: str
    source: str
    limit: int = 20


DEFAULT_FEEDS: Tuple[FeedSpec, ...] = (
    FeedSpec(url=WFDD_LOCAL, source=LOCAL_SOURCE),
    FeedSpec(url=NPR_TOP, source="npr"),
)


def _text(element: Optional[ET.Element]) -> str:
    return (element.text or "").strip() if element is not None else ""


def parse_feed(xml_text: str, source: str, limit: int = 20) -> List[StoryRecord]:
    """Parse RSS 2.0 items (or Atom entries) into story records."""

    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise FeedError(f"Malformed feed for source '{source}': {exc}") from exc

    stories: List[StoryRecord] = []
    items = root.findall("./channel/item") or root.findall(f"{ATOM_NS}entry")
    for item in items[:limit]:
        if item.tag == f"{ATOM_NS}entry":
            link_el = item.find(f"{ATOM_NS}link")
            link = link_el.get("href", "") if link_el is not None else ""
            title = _text(item.find(f"{ATOM_NS}title"))
            summary = _text(item.find(f"{ATOM_NS}summary")) or _text(item.find(f"{ATOM_NS}content"))
        else:
            link = _text(item.find("link"))
            title = _text(item.find("title"))
            summary = _text(item.find("description")) or _text(item.find(CONTENT_ENCODED))
        stories.append(
            StoryRecord(
                title=strip_markup(title),
                summary=strip_markup(summary),
                link=link,
                source=source,
            )
        )
    return stories


class FeedReader:
    """Fetches configured feeds; a failing feed is logged and skipped."""

    def __init__(
        self,
        feeds: Sequence[FeedSpec] = DEFAULT_FEEDS,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.feeds = list(feeds)
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def fetch(self, spec: FeedSpec) -> List[StoryRecord]:
        LOGGER.info("Fetching %s feed: %s", spec.source, spec.url)
        try:
            response = self._session.get(spec.url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FeedError(f"Feed request failed for {spec.url}: {exc}") from exc
        stories = parse_feed(response.text, spec.source, spec.limit)
        LOGGER.info("Got %d %s items", len(stories), spec.source)
        return stories

    def fetch_all(self) -> List[StoryRecord]:
        stories: List[StoryRecord] = []
        for spec in self.feeds:
            try:
                stories.extend(self.fetch(spec))
            except FeedError as exc:
                LOGGER.warning("Failed to fetch %s feed: %s", spec.source, exc)
        return stories


def pick_stories(
    records: Iterable[StoryRecord],
    local_source: str = LOCAL_SOURCE,
    local_count: int = 4,
    national_count: int = 1,
    max_urls: int = 5,
) -> Tuple[List[StoryRecord], List[str]]:
    """Pick the first local stories then the first non-local ones; return stories and source URLs."""

    records = list(records)
    local = [story for story in records if story.source == local_source][:local_count]
    national = [story for story in records if story.source != local_source][:national_count]
    selected = local + national
    source_urls = [story.link for story in selected if story.link][:max_urls]
    return selected, source_urls
