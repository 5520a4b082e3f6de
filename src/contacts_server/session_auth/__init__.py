"""Session authentication core package.

This namespace hosts the **HTTP-agnostic** building blocks of the browser
login: an OAuth 2.0 authorization-code exchange followed by a cookie-backed
server-side session.

Sub-modules
-----------
clock
    Test-friendly time abstraction.
tokens
    Random alphanumeric state tokens and session ids.
state
    Single-use registry of outstanding CSRF ``state`` tokens.
store
    Session storage with collision-checked inserts.
cookies
    ``Cookie`` header parsing and ``Set-Cookie`` construction.
models
    Immutable token and session records.
errors
    Closed exception taxonomy mapped to HTTP statuses by the web layer.
config
    Environment-driven OAuth client settings.
service
    The façade used by HTTP handlers.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, default_clock  # noqa: F401
from .config import AuthSettings  # noqa: F401
from .cookies import build_session_cookie, extract_session_id  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    ProtocolViolationError,
    SessionAuthError,
    UpstreamFailureError,
)
from .log_utils import get_auth_logger  # noqa: F401
from .models import CallbackResult, SessionEntry, TokenRecord  # noqa: F401
from .service import SessionAuthService  # noqa: F401
from .state import StateRegistry  # noqa: F401
from .store import MemorySessionStore, SessionStore  # noqa: F401
from .tokens import generate_token  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "default_clock",
    # config
    "AuthSettings",
    # cookies
    "build_session_cookie",
    "extract_session_id",
    # errors
    "SessionAuthError",
    "ProtocolViolationError",
    "UpstreamFailureError",
    "ConfigurationError",
    # models
    "CallbackResult",
    "SessionEntry",
    "TokenRecord",
    # containers
    "StateRegistry",
    "SessionStore",
    "MemorySessionStore",
    # service
    "SessionAuthService",
    # tokens
    "generate_token",
    # logging helpers
    "get_auth_logger",
]
