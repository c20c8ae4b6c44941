"""
Request context middleware.

Assigns every request an id (echoing a valid incoming X-Request-Id),
exposes it to log records, and adds the security headers to every
response.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from shared.logging import request_id_var

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def resolve_request_id(incoming: str | None) -> str:
    """Echo a well-formed incoming id, otherwise generate one."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id propagation plus security and timing headers."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get("x-request-id"))
        token = request_id_var.set(request_id)
        started = time.monotonic()
        try:
            logger.debug(f"request.start {request.method} {request.url.path}")
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        duration_ms = int((time.monotonic() - started) * 1000)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        response.headers["X-Request-Id"] = request_id
        response.headers["Server-Timing"] = f"app;dur={duration_ms}"
        return response
