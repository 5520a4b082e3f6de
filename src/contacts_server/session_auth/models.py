"""Typed, immutable records for issued tokens and the sessions holding them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from contacts_server.session_auth.clock import Clock, default_clock
from contacts_server.session_auth.cookies import build_session_cookie


class TokenParseError(ValueError):
    """Raised when a token endpoint body does not describe a usable token."""


def _required_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise TokenParseError(f"token response field {key!r} missing or not a string")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TokenParseError(f"token response field {key!r} is not a string")
    return value


@dataclass(frozen=True, slots=True)
class TokenRecord:
    """Access credential returned by the provider's token endpoint."""

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str | None = None
    scope: str | None = None

    @classmethod
    def from_response(cls, data: Any) -> "TokenRecord":
        """Build a record from a decoded JSON body.

        Raises
        ------
        TokenParseError
            If a required field is missing or has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise TokenParseError("token response is not a JSON object")

        expires_in = data.get("expires_in")
        # bool is an int subclass; "true" is not a lifetime
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise TokenParseError("token response field 'expires_in' is not an integer")
        if expires_in < 0:
            raise TokenParseError("token response field 'expires_in' is negative")

        return cls(
            access_token=_required_str(data, "access_token"),
            token_type=_required_str(data, "token_type"),
            expires_in=expires_in,
            refresh_token=_optional_str(data, "refresh_token"),
            scope=_optional_str(data, "scope"),
        )


@dataclass(frozen=True, slots=True)
class SessionEntry:
    """A stored :class:`TokenRecord` plus the instant its session began."""

    token: TokenRecord
    created_at: float = field(default_factory=default_clock)

    @property
    def expires_at(self) -> float:
        return self.created_at + self.token.expires_in

    def is_expired(self, *, clock: Clock = default_clock) -> bool:
        """Return *True* once the cookie ``Max-Age`` handed to the browser has elapsed."""
        return clock() >= self.expires_at


@dataclass(frozen=True, slots=True)
class CallbackResult:
    """Outcome of a successful callback: the new session and where to send the browser."""

    session_id: str
    max_age: int
    redirect_to: str = "/"

    @property
    def set_cookie(self) -> str:
        """``Set-Cookie`` header value for the new session."""
        return build_session_cookie(self.session_id, self.max_age)
