"""Unit tests for the /auth routes, home route and correlation-id middleware."""

from __future__ import annotations

import re
from dataclasses import replace
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from contacts_server.servers.main import create_app
from contacts_server.session_auth.service import SessionAuthService

TOKEN_BODY = {"access_token": "abc", "expires_in": 3600, "token_type": "Bearer"}


# --------------------------------------------------------------------------- #
# Fixtures                                                                    #
# --------------------------------------------------------------------------- #
@pytest.fixture()
def asgi_app(service: SessionAuthService):
    """Starlette application wired to the test service."""
    return create_app(service=service)


@pytest.fixture()
async def client(asgi_app):
    """Async HTTP client bound to the Starlette app."""
    transport = httpx.ASGITransport(app=asgi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _start(client: httpx.AsyncClient) -> str:
    resp = await client.get("/auth")
    assert resp.status_code == 303
    return parse_qs(urlparse(resp.headers["location"]).query)["state"][0]


# --------------------------------------------------------------------------- #
# GET /auth                                                                   #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_start_redirects_to_provider(client: httpx.AsyncClient, service, settings):
    resp = await client.get("/auth")
    assert resp.status_code == 303
    location = resp.headers["location"]
    assert location.startswith(settings.authorize_url + "?")
    state = parse_qs(urlparse(location).query)["state"][0]
    assert len(state) == 16
    assert state in service.states


@pytest.mark.anyio
async def test_start_with_missing_credentials_returns_500(settings, clock):
    svc = SessionAuthService(replace(settings, client_id=""), clock=clock)
    transport = httpx.ASGITransport(app=create_app(service=svc))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/auth")
    assert resp.status_code == 500
    assert resp.text == "Internal Server Error"
    assert "OAUTH_CLIENT_ID" not in resp.text


# --------------------------------------------------------------------------- #
# GET /auth/callback                                                          #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_callback_success_sets_cookie(client: httpx.AsyncClient, service, token_endpoint):
    token_endpoint(200, TOKEN_BODY)
    state = await _start(client)

    resp = await client.get("/auth/callback", params={"code": "c0de", "state": state})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    cookie = resp.headers["set-cookie"]
    match = re.fullmatch(r"session_id=([A-Za-z0-9]{32}); Max-Age=3600", cookie)
    assert match, cookie
    assert service.is_logged_in(f"session_id={match.group(1)}")
    assert state not in service.states


@pytest.mark.anyio
async def test_callback_unknown_state_is_401(client: httpx.AsyncClient, service, token_endpoint):
    calls = token_endpoint(200, TOKEN_BODY)
    registered = await _start(client)

    resp = await client.get("/auth/callback", params={"code": "c", "state": "bogus"})

    assert resp.status_code == 401
    assert resp.text == "Unauthorized"
    assert "bogus" not in resp.text
    assert calls == []
    assert service.states.outstanding() == [registered]


@pytest.mark.anyio
async def test_callback_upstream_failure_is_500(client: httpx.AsyncClient, service, token_endpoint):
    token_endpoint(502, {"error": "bad gateway"})
    state = await _start(client)

    resp = await client.get("/auth/callback", params={"code": "c", "state": state})

    assert resp.status_code == 500
    assert resp.text == "Token exchange failed"
    assert "set-cookie" not in resp.headers
    assert len(service.sessions) == 0

    replay = await client.get("/auth/callback", params={"code": "c", "state": state})
    assert replay.status_code == 401


@pytest.mark.anyio
@pytest.mark.parametrize("params", [{}, {"code": "c"}, {"state": "s"}, {"code": "", "state": "s"}])
async def test_callback_missing_parameters_is_400(client: httpx.AsyncClient, params):
    resp = await client.get("/auth/callback", params=params)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_callback_provider_error_burns_state(client: httpx.AsyncClient, service, token_endpoint):
    calls = token_endpoint(200, TOKEN_BODY)
    state = await _start(client)

    resp = await client.get(
        "/auth/callback", params={"error": "access_denied", "state": state}
    )

    assert resp.status_code == 400
    assert state not in service.states
    assert calls == []


# --------------------------------------------------------------------------- #
# Session checks                                                              #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_test_session_and_home(client: httpx.AsyncClient, token_endpoint):
    token_endpoint(200, TOKEN_BODY)

    resp = await client.get("/auth/test-session")
    assert resp.text == "false"

    state = await _start(client)
    cb = await client.get("/auth/callback", params={"code": "c", "state": state})
    session_id = cb.headers["set-cookie"].split(";")[0].split("=", 1)[1]

    headers = {"Cookie": f"theme=dark; session_id={session_id}"}
    resp = await client.get("/auth/test-session", headers=headers)
    assert resp.status_code == 200
    assert resp.text == "true"
    # the home route is a static landing page outside the cookie path
    resp = await client.get("/", headers=headers)
    assert resp.status_code == 200
    assert resp.text == "Contacts server"


@pytest.mark.anyio
async def test_test_session_with_unknown_cookie(client: httpx.AsyncClient):
    resp = await client.get("/auth/test-session", headers={"Cookie": "session_id=nope"})
    assert resp.status_code == 200
    assert resp.text == "false"


# --------------------------------------------------------------------------- #
# Middleware / health                                                         #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_healthz_and_correlation_id(client: httpx.AsyncClient):
    resp = await client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert re.fullmatch(r"[0-9a-f]{32}", resp.headers["x-correlation-id"])


@pytest.mark.anyio
async def test_inbound_correlation_id_is_echoed(client: httpx.AsyncClient):
    resp = await client.get("/healthz", headers={"X-Correlation-ID": "req-42"})
    assert resp.headers["x-correlation-id"] == "req-42"


@pytest.mark.anyio
async def test_malformed_correlation_id_is_replaced(client: httpx.AsyncClient):
    resp = await client.get("/healthz", headers={"X-Correlation-ID": "bad id with spaces!"})
    assert resp.headers["x-correlation-id"] != "bad id with spaces!"
    assert re.fullmatch(r"[0-9a-f]{32}", resp.headers["x-correlation-id"])
