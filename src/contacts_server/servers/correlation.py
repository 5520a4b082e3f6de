"""Correlation ID middleware for request tracing.

Takes the caller's ``X-Correlation-ID`` (or mints a UUID4 hex string), sets
it in ``request.state.correlation_id`` for handlers, echoes it on the
response and logs one line per request with it.

Secrets MUST NOT be logged: only method, path and status are recorded, never
query strings (they carry ``code`` and ``state``) or cookies.
"""

from __future__ import annotations

import logging
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

_HEADER_NAME = "X-Correlation-ID"
# inbound ids are echoed into headers and logs
_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
_logger = logging.getLogger("contacts-server.correlation")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that attaches a per-request correlation ID."""

    def __init__(self, app: ASGIApp, header_name: str = _HEADER_NAME) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        inbound = request.headers.get(self.header_name) or ""
        correlation_id = inbound if _VALID_ID.match(inbound) else uuid.uuid4().hex
        request.state.correlation_id = correlation_id

        response = await call_next(request)

        response.headers[self.header_name] = correlation_id
        _logger.debug(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"correlation_id": correlation_id},
        )
        return response
