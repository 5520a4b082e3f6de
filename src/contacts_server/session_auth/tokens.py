"""Random alphanumeric identifiers for CSRF state values and session ids.

Both kinds of identifier are drawn from the 62-symbol alphabet
``[A-Za-z0-9]`` so they survive query strings and cookie values without any
escaping.  Characters come from :mod:`secrets`, which is safe to call from
many request threads at once.

This module performs **no logging** of generated values.
"""

from __future__ import annotations

import secrets
import string
from typing import Final

ALPHABET: Final[str] = string.ascii_letters + string.digits

STATE_TOKEN_LENGTH: Final[int] = 16
SESSION_ID_LENGTH: Final[int] = 32


def generate_token(length: int) -> str:
    """Return a random string of exactly *length* alphanumeric characters.

    Parameters
    ----------
    length:
        Number of characters; ``0`` yields an empty string.

    Raises
    ------
    ValueError
        If *length* is negative.
    """
    if length < 0:
        raise ValueError("token length must not be negative")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def generate_state_token() -> str:
    return generate_token(STATE_TOKEN_LENGTH)


def generate_session_id() -> str:
    return generate_token(SESSION_ID_LENGTH)
