"""Injectable time source for state and session expiry.

Expiry decisions in :mod:`contacts_server.session_auth` never call
``time.time()`` directly; they go through a :class:`Clock` so tests can pin
the current instant.

Example
-------
>>> from contacts_server.session_auth.clock import default_clock
>>> isinstance(default_clock(), float)
True
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Zero-argument callable returning seconds since the UNIX epoch."""

    def __call__(self) -> float: ...


def default_clock() -> float:
    """Wall-clock seconds, delegated to ``time.time()``."""
    return time.time()
