"""SessionAuthService – browser login through an OAuth 2.0 provider.

This service encapsulates the *business logic* of the authorization-code
flow.  Handlers in :mod:`contacts_server.servers.auth` call the thin façade
methods below:

``start_login``
    Mint and register a CSRF state token, return the provider authorize URL.
``handle_callback``
    Consume the state, exchange the code, open a session.
``is_logged_in`` / ``get_token``
    Resolve a raw ``Cookie`` header to a live session.

State registry and session store are injected; locks live inside them and
are never held across the outbound token request.

**All secrets are redacted** from logs: client secret, codes and tokens are
never logged, state values and session ids only as masked prefixes.
"""

from __future__ import annotations

import base64
import logging
from typing import Callable, Final
from urllib.parse import urlencode, urlsplit

import requests

from contacts_server.session_auth.clock import Clock, default_clock
from contacts_server.session_auth.config import AuthSettings
from contacts_server.session_auth.cookies import extract_session_id
from contacts_server.session_auth.errors import (
    ConfigurationError,
    ProtocolViolationError,
    UpstreamFailureError,
)
from contacts_server.session_auth.log_utils import get_auth_logger
from contacts_server.session_auth.models import CallbackResult, TokenParseError, TokenRecord
from contacts_server.session_auth.state import StateRegistry
from contacts_server.session_auth.store import MemorySessionStore, SessionStore
from contacts_server.session_auth.tokens import generate_session_id, generate_state_token
from contacts_server.utils.logging import mask_sensitive

_LOG = logging.getLogger("contacts-server.session_auth.service")

HOME_ROUTE: Final[str] = "/"


def _check_endpoint(url: str, name: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(f"{name} is not an absolute http(s) URL: {url!r}")
    return url


def _basic_auth_header(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


# --------------------------------------------------------------------------- #
# Public service                                                              #
# --------------------------------------------------------------------------- #
class SessionAuthService:
    """Application service orchestrating login, callback and session lookup."""

    def __init__(
        self,
        settings: AuthSettings | None = None,
        *,
        states: StateRegistry | None = None,
        sessions: SessionStore | None = None,
        clock: Clock = default_clock,
        state_factory: Callable[[], str] = generate_state_token,
        session_id_factory: Callable[[], str] = generate_session_id,
    ) -> None:
        self.settings = settings if settings is not None else AuthSettings.from_env()
        # both containers define __len__, so an empty one is falsy
        if states is None:
            states = StateRegistry(
                ttl_seconds=self.settings.state_ttl_seconds,
                max_entries=self.settings.state_max_entries,
                clock=clock,
            )
        if sessions is None:
            sessions = MemorySessionStore(
                clock=clock, enforce_expiry=self.settings.enforce_session_expiry
            )
        self.states: StateRegistry = states
        self.sessions: SessionStore = sessions
        self._state_factory = state_factory
        self._session_id_factory = session_id_factory

    # ------------------------------------------------------------------ #
    # Login start                                                        #
    # ------------------------------------------------------------------ #
    def _check_configured(self) -> None:
        cfg = self.settings
        if not cfg.client_id or not cfg.client_secret:
            raise ConfigurationError("OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET not configured")
        _check_endpoint(cfg.authorize_url, "OAUTH_AUTHORIZE_URL")
        _check_endpoint(cfg.token_url, "OAUTH_TOKEN_URL")
        _check_endpoint(cfg.redirect_uri, "OAUTH_REDIRECT_URI")

    def build_authorize_url(self, state: str) -> str:
        """Return the provider authorize URL carrying *state*."""
        cfg = self.settings
        query_params: dict[str, str] = {
            "response_type": "code",
            "client_id": cfg.client_id,
            "scope": cfg.scope,
            "redirect_uri": cfg.redirect_uri,
            "state": state,
        }
        separator = "&" if urlsplit(cfg.authorize_url).query else "?"
        return f"{cfg.authorize_url}{separator}{urlencode(query_params)}"

    def start_login(self, *, correlation_id: str | None = None) -> str:
        """Mint a state token, register it and return the redirect target.

        Raises
        ------
        ConfigurationError
            If the static OAuth configuration is incomplete or malformed.
        """
        self._check_configured()
        state = self._state_factory()
        url = self.build_authorize_url(state)
        # registered only once the URL exists, so a failed build leaks nothing
        self.states.register(state)
        get_auth_logger(state=state, correlation_id=correlation_id).debug(
            "Login started, redirecting to %s", self.settings.authorize_url
        )
        return url

    # ------------------------------------------------------------------ #
    # Callback                                                           #
    # ------------------------------------------------------------------ #
    def discard_state(self, state: str) -> bool:
        """Consume *state* without exchanging anything (provider-side error)."""
        return self.states.consume(state)

    def handle_callback(
        self, code: str, state: str, *, correlation_id: str | None = None
    ) -> CallbackResult:
        """Validate *state*, exchange *code* and open a session.

        Raises
        ------
        ProtocolViolationError
            If *state* is unknown, expired or already consumed.
        UpstreamFailureError
            If the token request fails or returns an unusable body.
        ConfigurationError
            If the token endpoint or client credentials are misconfigured.
        """
        log = get_auth_logger(state=state, correlation_id=correlation_id)

        if not self.states.consume(state):
            log.warning(
                "Callback state not found among %d outstanding state(s)",
                len(self.states),
            )
            raise ProtocolViolationError(
                f"state {mask_sensitive(state)} unknown, expired or already used"
            )

        record = self._exchange_code(code)
        session_id = self.sessions.insert_unique(self._session_id_factory, record)

        get_auth_logger(
            state=state, session_id=session_id, correlation_id=correlation_id
        ).info(
            "Session opened (token_type=%s, expires in %ss)",
            record.token_type,
            record.expires_in,
        )
        return CallbackResult(
            session_id=session_id, max_age=record.expires_in, redirect_to=HOME_ROUTE
        )

    def _exchange_code(self, code: str) -> TokenRecord:
        """POST *code* to the token endpoint and parse the response. No retry."""
        cfg = self.settings
        if not cfg.client_id or not cfg.client_secret:
            raise ConfigurationError("OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET not configured")
        token_url = _check_endpoint(cfg.token_url, "OAUTH_TOKEN_URL")

        payload: dict[str, str] = {
            "code": code,
            "redirect_uri": cfg.redirect_uri,
            "grant_type": "authorization_code",
        }
        headers = {
            "Authorization": _basic_auth_header(cfg.client_id, cfg.client_secret),
            "Accept": "application/json",
        }

        try:
            resp = requests.post(
                token_url, data=payload, headers=headers, timeout=cfg.token_timeout
            )
        except requests.RequestException as exc:
            raise UpstreamFailureError(
                f"token request failed: {type(exc).__name__}"
            ) from exc

        if not resp.ok:
            raise UpstreamFailureError(f"token endpoint returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamFailureError("token endpoint returned a non-JSON body") from exc

        try:
            return TokenRecord.from_response(data)
        except TokenParseError as exc:
            raise UpstreamFailureError(str(exc)) from exc

    # ------------------------------------------------------------------ #
    # Session lookup                                                     #
    # ------------------------------------------------------------------ #
    def is_logged_in(self, raw_cookie_header: str | None) -> bool:
        """Return *True* if the header names a live session."""
        session_id = extract_session_id(raw_cookie_header)
        if not session_id:
            return False
        return self.sessions.contains(session_id)

    def get_token(self, raw_cookie_header: str | None) -> TokenRecord | None:
        """Return the token behind the caller's session, for server-side use only."""
        session_id = extract_session_id(raw_cookie_header)
        if not session_id:
            return None
        return self.sessions.get(session_id)

    # ------------------------------------------------------------------ #
    # Maintenance                                                        #
    # ------------------------------------------------------------------ #
    def sweep(self) -> tuple[int, int]:
        """Drop expired states and sessions; return ``(states, sessions)`` removed."""
        removed_states = self.states.expire()
        removed_sessions = self.sessions.cleanup_expired()
        if removed_states or removed_sessions:
            _LOG.debug(
                "Expired %d state token(s) and %d session(s)",
                removed_states,
                removed_sessions,
            )
        return removed_states, removed_sessions
