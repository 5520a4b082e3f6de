"""Static OAuth client configuration.

Environment variables
---------------------
OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET
    Client credentials issued by the provider.  Not required at start-up;
    starting a login without them raises
    :class:`~contacts_server.session_auth.errors.ConfigurationError`.
OAUTH_REDIRECT_URI
    Callback URL registered with the provider.
OAUTH_SCOPE
    Space-separated scope list requested on every login.
OAUTH_AUTHORIZE_URL / OAUTH_TOKEN_URL
    Provider endpoints (Spotify Accounts by default).
OAUTH_TOKEN_TIMEOUT
    ``<connect>,<read>`` seconds for the token request.
AUTH_STATE_TTL_SECONDS / AUTH_STATE_MAX_ENTRIES
    Lifetime and bound of outstanding CSRF state tokens.
AUTH_ENFORCE_SESSION_EXPIRY
    Reject sessions whose ``expires_in`` has elapsed (default on).
AUTH_SWEEP_INTERVAL_SECONDS
    Period of the background expiry sweep; ``0`` disables it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from contacts_server.session_auth.state import (
    DEFAULT_STATE_MAX_ENTRIES,
    DEFAULT_STATE_TTL_SECONDS,
)
from contacts_server.utils.environment import env_bool, env_int, env_str, env_timeout

DEFAULT_AUTHORIZE_URL: Final[str] = "https://accounts.spotify.com/authorize"
DEFAULT_TOKEN_URL: Final[str] = "https://accounts.spotify.com/api/token"
DEFAULT_REDIRECT_URI: Final[str] = "http://localhost:3000/auth/callback"
DEFAULT_SCOPE: Final[str] = "streaming user-read-email user-read-private"
DEFAULT_TOKEN_TIMEOUT: Final[tuple[float, float]] = (5.0, 20.0)
DEFAULT_SWEEP_INTERVAL_SECONDS: Final[int] = 60


@dataclass(frozen=True, slots=True, repr=False)
class AuthSettings:
    """Deployment-wide OAuth settings; immutable once loaded."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scope: str = DEFAULT_SCOPE
    authorize_url: str = DEFAULT_AUTHORIZE_URL
    token_url: str = DEFAULT_TOKEN_URL
    token_timeout: tuple[float, float] = DEFAULT_TOKEN_TIMEOUT
    state_ttl_seconds: int = DEFAULT_STATE_TTL_SECONDS
    state_max_entries: int = DEFAULT_STATE_MAX_ENTRIES
    enforce_session_expiry: bool = True
    sweep_interval_seconds: int = DEFAULT_SWEEP_INTERVAL_SECONDS

    @classmethod
    def from_env(cls) -> "AuthSettings":
        """Load settings from ``OAUTH_*`` / ``AUTH_*`` environment variables."""
        return cls(
            client_id=env_str("OAUTH_CLIENT_ID"),
            client_secret=env_str("OAUTH_CLIENT_SECRET"),
            redirect_uri=env_str("OAUTH_REDIRECT_URI", DEFAULT_REDIRECT_URI),
            scope=env_str("OAUTH_SCOPE", DEFAULT_SCOPE),
            authorize_url=env_str("OAUTH_AUTHORIZE_URL", DEFAULT_AUTHORIZE_URL),
            token_url=env_str("OAUTH_TOKEN_URL", DEFAULT_TOKEN_URL),
            token_timeout=env_timeout("OAUTH_TOKEN_TIMEOUT", DEFAULT_TOKEN_TIMEOUT),
            state_ttl_seconds=env_int("AUTH_STATE_TTL_SECONDS", DEFAULT_STATE_TTL_SECONDS),
            state_max_entries=env_int("AUTH_STATE_MAX_ENTRIES", DEFAULT_STATE_MAX_ENTRIES),
            enforce_session_expiry=env_bool("AUTH_ENFORCE_SESSION_EXPIRY", True),
            sweep_interval_seconds=env_int(
                "AUTH_SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS
            ),
        )

    def __repr__(self) -> str:
        # client_secret is never rendered
        return (
            f"AuthSettings(client_id={self.client_id!r}, redirect_uri={self.redirect_uri!r}, "
            f"authorize_url={self.authorize_url!r}, token_url={self.token_url!r})"
        )
