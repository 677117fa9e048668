"""Logging setup shared by the CLI and the library modules."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"

# HTTP libraries log every connection at DEBUG.
NOISY_LOGGERS = ("urllib3", "requests")


def parse_level(level: Union[int, str, None]) -> int:
    """Accept ``logging`` constants or names such as ``"debug"``; default INFO."""

    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install one stream handler on the root logger.

    Called once by the CLI; library code only asks for named loggers via
    :func:`get_logger`, which falls back to this setup when nothing else
    configured logging first.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(parse_level(level))
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "newsmini")
