"""
Structured logging setup.

Every module logs under the ``studyai`` namespace so a single handler
controls the whole service.

Usage:
    from studyai.utils.logging import get_logger
    logger = get_logger("studyai.pipeline.intent")
    logger.info("Classified intent=%s", intent)
"""

from __future__ import annotations

import logging
import sys

_configured = False


def setup_logging(level: int | str | None = None) -> None:
    """Configure the ``studyai`` logger once for the entire application."""
    global _configured
    if _configured:
        return

    if level is None:
        from studyai.core.config import settings

        level = settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger("studyai")
    root.setLevel(level)
    root.addHandler(handler)
    root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the ``studyai`` namespace.

    Automatically calls ``setup_logging()`` on first use to ensure
    the root handler is attached.
    """
    setup_logging()
    return logging.getLogger(name)
