"""Structured logging helpers for session authentication.

This module restricts **which** contextual attributes are attached to log
records so that state tokens and session ids never reach the logs in full.
The adapter only injects these fields:

- ``state``          – CSRF state token, first 4 characters kept
- ``session_id``     – Session identifier, first 6 characters kept
- ``correlation_id`` – Request correlation id set by the middleware

Usage
-----
>>> from contacts_server.session_auth.log_utils import get_auth_logger
>>> log = get_auth_logger(state="Xa81kq0ZpLm3Tt9B", correlation_id="4f2c")
>>> log.info("Callback received")
INFO contacts-server.session_auth Callback received [state=Xa81**** correlation_id=4f2c]
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

from contacts_server.utils.logging import mask_sensitive

_MASK_KEEP: dict[str, int] = {"state": 4, "session_id": 6}


class _AuthLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted, masked auth context into log records."""

    extra_keys = ("state", "session_id", "correlation_id")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if not extra or extra.get(k) is None:
                continue
            if k in _MASK_KEEP:
                extra_clean[k] = mask_sensitive(str(extra[k]), _MASK_KEEP[k])
            else:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # call-site extras win
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        if self.extra:
            context = " ".join(f"{k}={v}" for k, v in self.extra.items())
            msg = f"{msg} [{context}]"
        return msg, kwargs


def get_auth_logger(
    *,
    base_logger_name: str = "contacts-server.session_auth",
    state: str | None = None,
    session_id: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with masked auth context."""
    logger = logging.getLogger(base_logger_name)
    return _AuthLoggerAdapter(
        logger,
        {
            "state": state,
            "session_id": session_id,
            "correlation_id": correlation_id,
        },
    )
