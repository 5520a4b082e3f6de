"""Logging setup and helpers for keeping secrets out of log output."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: int | str = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Configure the ``contacts-server`` logger hierarchy.

    Args:
        level: Level name or number applied to the package loggers.
        stream: Output stream; defaults to stderr.

    Returns:
        The configured ``contacts-server`` root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("contacts-server")
    logger.setLevel(level)

    # Idempotent across repeated app factory calls
    for handler in list(logger.handlers):
        if getattr(handler, "_contacts_server", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._contacts_server = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Mask a secret-ish value, keeping only its first *keep_chars* characters.

    Args:
        value: The value to mask.
        keep_chars: Number of leading characters to keep visible.

    Returns:
        ``"abcd****"`` style string; ``"<none>"`` for empty input.
    """
    if not value:
        return "<none>"
    if len(value) <= keep_chars:
        return "*" * len(value)
    return value[:keep_chars] + "****"
