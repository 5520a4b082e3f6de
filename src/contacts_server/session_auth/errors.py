"""Exception types raised by the session authentication core.

The taxonomy is closed: the HTTP layer tells "the client's fault"
(:class:`ProtocolViolationError`) from "our fault"
(:class:`ConfigurationError`) from "the provider's fault"
(:class:`UpstreamFailureError`) by type alone.  Each exception carries a
public message that is safe to send to the browser; the ``detail`` is for the
server log only.
"""

from __future__ import annotations

from typing import ClassVar


class SessionAuthError(RuntimeError):
    """Base class for failures surfaced by :mod:`contacts_server.session_auth`."""

    status_code: ClassVar[int] = 500
    error: ClassVar[str] = "internal_error"
    public_message: ClassVar[str] = "Internal Server Error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.public_message)
        self.detail: str = detail or self.public_message

    def to_payload(self) -> dict[str, str]:
        """Return a JSON-serialisable payload **without secrets** or internal detail."""
        return {"error": self.error, "message": self.public_message}


class ProtocolViolationError(SessionAuthError):
    """The callback ``state`` is unknown, expired or already consumed."""

    status_code = 401
    error = "invalid_state"
    public_message = "Unauthorized"


class UpstreamFailureError(SessionAuthError):
    """The token exchange failed: network error, non-2xx, or an unusable body.

    Never retried; the authorization code is single-use at the provider, so a
    new login has to be started.
    """

    status_code = 500
    error = "upstream_failure"
    public_message = "Token exchange failed"


class ConfigurationError(SessionAuthError):
    """Static OAuth configuration is missing or malformed."""

    status_code = 500
    error = "configuration_error"
