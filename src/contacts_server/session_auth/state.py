"""Registry of outstanding CSRF ``state`` tokens.

A state token is minted when a login starts and must come back, unchanged,
on the provider callback.  The registry guarantees **single use**: of any
number of callbacks presenting the same token, concurrently or not, exactly
one sees :meth:`StateRegistry.consume` return ``True``.

Abandoned logins never come back for their token, so outstanding entries
expire after ``ttl_seconds`` and the registry never holds more than
``max_entries`` of them (oldest first out).  An expired or evicted token is
indistinguishable from one that was never registered.

The bound is a trade-off.  Memory stays capped no matter how many logins are
started, but a client that floods the login route can push other users'
in-flight states out, and those callbacks then fail as unknown state (401).
Raise ``max_entries`` when that matters more than memory.

Logging
-------
The registry itself never logs token values; callers log masked prefixes.
"""

from __future__ import annotations

import threading
from typing import Final

from cachetools import TTLCache

from contacts_server.session_auth.clock import Clock, default_clock

DEFAULT_STATE_TTL_SECONDS: Final[int] = 600
DEFAULT_STATE_MAX_ENTRIES: Final[int] = 10_000


class StateRegistry:
    """Thread-safe set of unconsumed state tokens with TTL expiry."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_STATE_TTL_SECONDS,
        max_entries: int = DEFAULT_STATE_MAX_ENTRIES,
        clock: Clock = default_clock,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("state TTL must be positive")
        if max_entries <= 0:
            raise ValueError("state registry size must be positive")
        self._lock = threading.Lock()
        self._tokens: TTLCache[str, bool] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=clock
        )

    def register(self, token: str) -> None:
        """Insert *token*; registering an outstanding token again is a no-op."""
        with self._lock:
            if token not in self._tokens:
                self._tokens[token] = True

    def consume(self, token: str) -> bool:
        """Remove *token* if outstanding and report whether it was."""
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def expire(self) -> int:
        """Drop expired tokens now and return how many were dropped."""
        with self._lock:
            return len(self._tokens.expire())

    def outstanding(self) -> list[str]:
        """Snapshot of the unexpired tokens, for diagnostics only."""
        with self._lock:
            self._tokens.expire()
            return list(self._tokens.keys())

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._tokens

    def __len__(self) -> int:
        with self._lock:
            self._tokens.expire()
            return len(self._tokens)
