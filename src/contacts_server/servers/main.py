"""Starlette application setup for the contacts server."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from contacts_server.servers.auth import build_auth_routes
from contacts_server.servers.correlation import CorrelationIdMiddleware
from contacts_server.session_auth.config import AuthSettings
from contacts_server.session_auth.service import SessionAuthService

logger = logging.getLogger("contacts-server.server.main")


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def home(request: Request) -> PlainTextResponse:
    # Post-login landing page. The session cookie is scoped to the auth
    # routes, so no session lookup happens here.
    return PlainTextResponse("Contacts server")


async def _sweep_forever(svc: SessionAuthService, interval: float) -> None:
    """Periodically drop expired state tokens and sessions."""
    while True:
        await anyio.sleep(interval)
        try:
            svc.sweep()
        except Exception:
            logger.exception("Expiry sweep failed")


def _lifespan_for(svc: SessionAuthService):
    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        interval = svc.settings.sweep_interval_seconds
        logger.info("Contacts server lifespan starting (%r)", svc.settings)
        async with anyio.create_task_group() as tg:
            if interval > 0:
                tg.start_soon(_sweep_forever, svc, interval)
            else:
                logger.info("Expiry sweep disabled")
            try:
                yield
            finally:
                tg.cancel_scope.cancel()
        logger.info("Contacts server lifespan shutdown complete.")

    return lifespan


def create_app(
    settings: AuthSettings | None = None,
    *,
    service: SessionAuthService | None = None,
    auth_base_path: str = "/auth",
) -> Starlette:
    """Build the ASGI application.

    Args:
        settings: OAuth settings; read from the environment when omitted.
        service: Pre-built service, mainly for tests. Takes precedence over
            *settings*.
        auth_base_path: Prefix of the login routes.

    Returns:
        The configured Starlette application; the service is reachable as
        ``app.state.auth_service``.
    """
    svc = service if service is not None else SessionAuthService(settings)

    routes = [
        Route("/", home, methods=["GET"], name="home"),
        Route("/healthz", health_check, methods=["GET"], include_in_schema=False),
        *build_auth_routes(svc, base_path=auth_base_path),
    ]
    app = Starlette(
        routes=routes,
        middleware=[Middleware(CorrelationIdMiddleware)],
        lifespan=_lifespan_for(svc),
    )
    app.state.auth_service = svc
    logger.debug("Registered routes: %s", [r.path for r in routes])
    return app
