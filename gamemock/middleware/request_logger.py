"""Request logging middleware: one structured line per request, tagged with a request id."""

from __future__ import annotations

import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

_MAX_PATH_LENGTH = 2048


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Bind a request id to structlog contextvars and log the outcome.

    Every log entry emitted while handling the request (auth rejections,
    simulated responses, callback scheduling) carries the same request_id,
    which is also returned to the client as ``x-request-id``.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = uuid4().hex[:8]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        method = request.method
        path = request.url.path[:_MAX_PATH_LENGTH]
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round((time.monotonic() - start) * 1000, 1),
            )
            raise

        response.headers["x-request-id"] = request_id
        logger.info(
            "request_completed",
            method=method,
            path=path,
            status=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 1),
            client_ip=request.client.host if request.client else "unknown",
        )
        return response
