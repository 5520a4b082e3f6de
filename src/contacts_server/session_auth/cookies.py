"""Session cookie reading and writing.

``Cookie`` request headers are untrusted browser input: every parse here is
optional and a malformed header simply yields "no session".
"""

from __future__ import annotations

from typing import Final

SESSION_COOKIE_NAME: Final[str] = "session_id"


def extract_session_id(raw_cookie_header: str | None) -> str | None:
    """Return the ``session_id`` value from a raw ``Cookie`` header.

    Pairs are split on ``;`` and trimmed; pairs without ``=`` are skipped.
    When the name occurs more than once the first occurrence wins.
    """
    if not raw_cookie_header:
        return None
    for pair in raw_cookie_header.split(";"):
        key, sep, value = pair.strip().partition("=")
        if sep and key.strip() == SESSION_COOKIE_NAME:
            return value.strip()
    return None


def build_session_cookie(session_id: str, max_age: int) -> str:
    """Return the ``Set-Cookie`` value ``session_id=<id>; Max-Age=<seconds>``."""
    return f"{SESSION_COOKIE_NAME}={session_id}; Max-Age={max_age}"
