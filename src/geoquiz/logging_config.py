"""Logging configuration helpers for geoquiz."""

from __future__ import annotations

import logging
import sys
from logging import Logger


def configure_logging(level: str = "INFO") -> Logger:
    """Configure stderr logging and return the package logger.

    stdout is left alone so the JSON-lines server keeps a clean protocol stream.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )
    return logging.getLogger("geoquiz")
