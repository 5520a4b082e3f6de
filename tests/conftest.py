"""Shared fixtures: a controllable clock, settings and a stubbed token endpoint."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable

import pytest
import requests

from contacts_server.session_auth.config import AuthSettings
from contacts_server.session_auth.service import SessionAuthService

TOKEN_URL = "https://accounts.example.test/api/token"
AUTHORIZE_URL = "https://accounts.example.test/authorize"
REDIRECT_URI = "http://localhost:3000/auth/callback"


def pytest_addoption(parser):
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that talk to a real OAuth provider",
    )


class FakeClock:
    """Clock frozen at *now* until advanced explicitly."""

    def __init__(self, now: float = 1_672_531_200.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def fake_response(status_code: int = 200, body: Any = None, *, json_error: bool = False) -> Any:
    """Minimal stand-in for :class:`requests.Response`."""
    resp = SimpleNamespace()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.text = "" if body is None else str(body)

    def _json() -> Any:
        if json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return body

    resp.json = _json
    return resp


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def settings() -> AuthSettings:
    return AuthSettings(
        client_id="dummy-client-id",
        client_secret="dummy-secret",
        redirect_uri=REDIRECT_URI,
        scope="streaming user-read-email user-read-private",
        authorize_url=AUTHORIZE_URL,
        token_url=TOKEN_URL,
        token_timeout=(1.0, 2.0),
    )


@pytest.fixture()
def service(settings: AuthSettings, clock: FakeClock) -> SessionAuthService:
    return SessionAuthService(settings, clock=clock)


@pytest.fixture()
def token_endpoint(monkeypatch: pytest.MonkeyPatch) -> Callable[..., list[dict[str, Any]]]:
    """Patch ``requests.post``; return a configurator that records every call.

    ``token_endpoint(status_code=200, body={...})`` installs the stub and
    returns the list the calls are appended to.
    """

    def _install(
        status_code: int = 200,
        body: Any = None,
        *,
        json_error: bool = False,
        raises: Exception | None = None,
    ) -> list[dict[str, Any]]:
        calls: list[dict[str, Any]] = []

        def fake_post(url: str, *, data: dict, headers: dict, timeout: Any) -> Any:  # noqa: ANN401
            calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
            if raises is not None:
                raise raises
            return fake_response(status_code, body, json_error=json_error)

        monkeypatch.setattr(requests, "post", fake_post, raising=True)
        return calls

    return _install
