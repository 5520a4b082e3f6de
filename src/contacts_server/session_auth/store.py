"""Process-local storage for issued sessions.

This module introduces a *narrow* session interface (:class:`SessionStore`)
and an in-memory implementation (:class:`MemorySessionStore`):

* **Uniqueness** – :meth:`~SessionStore.insert_unique` draws candidate ids
  and inserts the first free one inside a single critical section, so two
  concurrent logins can never end up with the same session id.
* **Expiry** – with ``enforce_expiry`` (the default) a session whose token
  lifetime has elapsed is treated as absent and dropped on access;
  :meth:`~SessionStore.cleanup_expired` sweeps the rest.
* **Isolation** – records are immutable and never handed to the browser;
  :meth:`~SessionStore.get` is for trusted server-side callers.

Nothing survives a restart.
"""

from __future__ import annotations

import threading
from typing import Callable, Protocol, runtime_checkable

from contacts_server.session_auth.clock import Clock, default_clock
from contacts_server.session_auth.models import SessionEntry, TokenRecord

# --------------------------------------------------------------------------- #
# public interface                                                            #
# --------------------------------------------------------------------------- #


@runtime_checkable
class SessionStore(Protocol):
    """Minimal session-storage contract used by the auth service."""

    def contains(self, session_id: str) -> bool: ...
    def get(self, session_id: str) -> TokenRecord | None: ...
    def insert_unique(self, generate: Callable[[], str], record: TokenRecord) -> str: ...

    # ----- maintenance ----------------------------------------------------- #
    def cleanup_expired(self) -> int: ...


# --------------------------------------------------------------------------- #
# In-memory implementation                                                    #
# --------------------------------------------------------------------------- #


class MemorySessionStore(SessionStore):
    """Lock-guarded ``dict`` implementation of :class:`SessionStore`."""

    def __init__(self, *, clock: Clock = default_clock, enforce_expiry: bool = True) -> None:
        self._clock = clock
        self._enforce_expiry = enforce_expiry
        self._lock = threading.Lock()
        self._entries: dict[str, SessionEntry] = {}

    def _live_entry(self, session_id: str) -> SessionEntry | None:
        # caller holds self._lock
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if self._enforce_expiry and entry.is_expired(clock=self._clock):
            del self._entries[session_id]
            return None
        return entry

    def contains(self, session_id: str) -> bool:
        with self._lock:
            return self._live_entry(session_id) is not None

    def get(self, session_id: str) -> TokenRecord | None:
        with self._lock:
            entry = self._live_entry(session_id)
        return entry.token if entry else None

    def insert_unique(self, generate: Callable[[], str], record: TokenRecord) -> str:
        """Store *record* under the first id from *generate* not already in use.

        An expired session still occupies its id until swept, so a candidate
        equal to it is rejected like any other collision.
        """
        entry = SessionEntry(token=record, created_at=self._clock())
        with self._lock:
            session_id = generate()
            while session_id in self._entries:
                session_id = generate()
            self._entries[session_id] = entry
        return session_id

    def cleanup_expired(self) -> int:
        if not self._enforce_expiry:
            return 0
        with self._lock:
            expired = [
                sid for sid, entry in self._entries.items()
                if entry.is_expired(clock=self._clock)
            ]
            for sid in expired:
                del self._entries[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
