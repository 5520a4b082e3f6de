"""Browser-based OAuth endpoints.

Handlers are intentionally thin:

1. Parse and validate HTTP-layer parameters.
2. Delegate business logic to ``SessionAuthService``.
3. Map :class:`~contacts_server.session_auth.errors.SessionAuthError`
   subclasses to a status code and a generic plain-text body.

The base path is configurable (default: ``/auth``) so that reverse-proxies can
mount the application under arbitrary prefixes.

SECURITY NOTE
-------------
• No raw secrets (state, codes, access / refresh tokens, client secret,
  session ids) are ever logged or echoed back in error bodies.
• Correlation IDs, if present in ``request.state.correlation_id``, are included
  in INFO logs to aid troubleshooting.

This module is HTTP-only and MUST remain free from heavy business logic.
"""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from contacts_server.session_auth.errors import SessionAuthError
from contacts_server.session_auth.service import SessionAuthService

_LOG = logging.getLogger("contacts-server.auth.routes")


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "-")


def _error_response(exc: SessionAuthError, request: Request) -> Response:
    """Log the internal detail, answer with the public message only."""
    log = _LOG.warning if exc.status_code < 500 else _LOG.error
    log(
        "%s on %s: %s correlation_id=%s",
        type(exc).__name__,
        request.url.path,
        exc.detail,
        _correlation_id(request),
    )
    return PlainTextResponse(exc.public_message, status_code=exc.status_code)


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def build_auth_routes(svc: SessionAuthService, *, base_path: str = "/auth") -> list[Route]:
    """Return the OAuth routes for *svc* under *base_path*."""
    base_path = base_path.rstrip("/")

    # ----- GET /auth ------------------------------------------------------ #
    async def _start_login(request: Request) -> Response:
        try:
            authorize_url = svc.start_login(correlation_id=_correlation_id(request))
        except SessionAuthError as exc:
            return _error_response(exc, request)

        _LOG.info("Login start correlation_id=%s", _correlation_id(request))
        # 303 See Other: the browser follows with GET
        return RedirectResponse(authorize_url, status_code=303)

    # ----- GET /auth/callback --------------------------------------------- #
    async def _callback(request: Request) -> Response:
        code = request.query_params.get("code")
        state = request.query_params.get("state")

        # Provider-side errors first (e.g. access_denied); the state is burnt
        # so the same redirect cannot be replayed later
        oauth_error = request.query_params.get("error")
        if oauth_error:
            if state:
                svc.discard_state(state)
            _LOG.info(
                "Provider returned error=%s correlation_id=%s",
                oauth_error[:64],
                _correlation_id(request),
            )
            return PlainTextResponse("Authorization was not granted", status_code=400)

        if not code or not state:
            return PlainTextResponse("Missing code or state", status_code=400)

        try:
            # blocking token request, kept off the event loop and outside all locks
            result = await run_in_threadpool(
                svc.handle_callback,
                code,
                state,
                correlation_id=_correlation_id(request),
            )
        except SessionAuthError as exc:
            return _error_response(exc, request)

        _LOG.info("Login success correlation_id=%s", _correlation_id(request))
        response = RedirectResponse(result.redirect_to, status_code=303)
        response.headers["set-cookie"] = result.set_cookie
        return response

    # ----- GET /auth/test-session ----------------------------------------- #
    async def _test_session(request: Request) -> Response:
        logged_in = svc.is_logged_in(request.headers.get("cookie"))
        return PlainTextResponse("true" if logged_in else "false")

    return [
        Route(base_path or "/", _start_login, methods=["GET"], name="auth_start"),
        Route(f"{base_path}/callback", _callback, methods=["GET"], name="auth_callback"),
        Route(f"{base_path}/test-session", _test_session, methods=["GET"], name="auth_test_session"),
    ]
