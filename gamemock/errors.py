"""Error taxonomy and the JSON error handlers that surface it."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = structlog.get_logger()


class GameMockError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedInput(GameMockError):
    """Request body does not parse into the expected shape."""

    status_code = 400

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> MalformedInput:
        return cls(_format_errors(exc.errors()))


class Unauthorized(GameMockError):
    """Missing or incorrect Authorization header on a protected route."""

    status_code = 401


class CallbackDeliveryFailure(GameMockError):
    """A callback could not be serialized or sent. Logged, never returned to a client."""


def _format_errors(errors) -> str:
    """Collapse pydantic error dicts into one line, e.g. ``notify_status: Input should be a valid integer``."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "malformed request body"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _handle_gamemock_error(request: Request, exc: GameMockError) -> JSONResponse:
    logger.info(
        "request_rejected",
        error_type=type(exc).__name__,
        status=exc.status_code,
        path=request.url.path,
    )
    return error_response(exc.status_code, exc.message)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, _format_errors(exc.errors()))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_request_error", path=request.url.path, method=request.method)
    return error_response(500, "internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto ``{"error": ...}`` responses.

    The catch-all handler keeps an unexpected fault inside one request
    from taking the process down.
    """
    app.add_exception_handler(GameMockError, _handle_gamemock_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected)
