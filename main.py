"""CLI entrypoint for the daily news mini crossword."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from newsmini.core.exceptions import CrosswordError
from newsmini.core.models import StoryRecord
from newsmini.data.clue_cache import ClueCache
from newsmini.data.lexicon import load_stopwords
from newsmini.data.word_selection import GeminiWordSelector, StaticWordSelector, WordSelector
from newsmini.engine.builder import BuilderConfig, PuzzleBuilder
from newsmini.engine.template import TEMPLATES
from newsmini.io.clue_provider import GeminiClueProvider
from newsmini.io.feeds import FeedReader, pick_stories
from newsmini.io.puzzle_store import PuzzleStore
from newsmini.utils.logger import configure_logging, get_logger
from newsmini.utils.pretty import print_puzzle


LOGGER = get_logger("newsmini.main")


def parse_words_file(path: Path) -> List[str]:
    """Read words from a file, one entry per line. Blank lines and # comments are skipped."""
    entries: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate the daily 5x5 news mini crossword",
    )
    parser.add_argument(
        "--template",
        type=str,
        choices=sorted(TEMPLATES),
        help="Grid template name (random when omitted)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--stopwords", type=Path, help="File with one stopword per line")
    parser.add_argument(
        "--words-file",
        type=Path,
        metavar="FILE",
        help="File with one answer per slot, in slot order (# comments and blank lines ignored)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("public/puzzles"),
        help="Directory receiving <date>.json",
    )
    parser.add_argument(
        "--cache",
        type=Path,
        default=Path("data/clue-cache.json"),
        help="Clue cache file",
    )
    parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Never call the LLM, even when LLM_ENABLED=true",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip feed fetching and build from the fallback vocabulary",
    )
    parser.add_argument(
        "--print",
        dest="print_puzzle",
        action="store_true",
        help="Print the finished grid and clues",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    stories: List[StoryRecord] = []
    source_urls: List[str] = []
    if not args.offline:
        stories, source_urls = pick_stories(FeedReader().fetch_all())
        LOGGER.info("Selected %d stories", len(stories))

    config = BuilderConfig(
        seed=args.seed,
        template=args.template,
        stopwords=load_stopwords(args.stopwords) if args.stopwords else None,
    )

    selector: Optional[WordSelector] = None
    provider = None
    if args.words_file:
        selector = StaticWordSelector(parse_words_file(args.words_file))
    if not args.no_llm and not args.offline:
        provider = GeminiClueProvider(cache=ClueCache(args.cache))
        if selector is None:
            selector = GeminiWordSelector()

    builder = PuzzleBuilder(config, clue_provider=provider, word_selector=selector)
    try:
        result = builder.build_sync(stories, source_urls=source_urls or None)
    except CrosswordError as exc:
        LOGGER.error("Puzzle build failed: %s", exc)
        return 1

    path = PuzzleStore(args.output_dir).save(result.document)
    if args.print_puzzle:
        print_puzzle(result)
    else:
        print(path)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
