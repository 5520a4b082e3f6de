"""Utility functions for reading typed values from the environment."""

from __future__ import annotations

import logging
import os
from typing import Final, Tuple

logger = logging.getLogger("contacts-server.utils.environment")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def env_str(name: str, default: str = "") -> str:
    """Return ``$name`` stripped, or *default* when unset or blank."""
    value = (os.getenv(name) or "").strip()
    return value or default


def env_bool(name: str, default: bool = False) -> bool:
    """Return ``$name`` parsed as a flag; unset means *default*."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return _truthy(raw)


def env_int(name: str, default: int) -> int:
    """Return ``$name`` as an integer.

    Raises
    ------
    ValueError
        If the variable is set to something that is not an integer.
    """
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def env_timeout(name: str, default: tuple[float, float]) -> tuple[float, float]:
    """Return a ``(connect, read)`` timeout pair from ``$name``.

    Accepts ``"5,20"`` or a single number used for both phases.
    """
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    parts = [p.strip() for p in raw.split(",")]
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise ValueError(f"{name} must be '<seconds>' or '<connect>,<read>', got {raw!r}") from None
    if len(values) == 1:
        return values[0], values[0]
    if len(values) == 2:
        return values[0], values[1]
    raise ValueError(f"{name} must be '<seconds>' or '<connect>,<read>', got {raw!r}")
