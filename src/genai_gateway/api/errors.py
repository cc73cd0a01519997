"""Translate gateway errors into HTTP responses.

:func:`error_response` is the only place that decides what a caller sees
when a request fails:

==========================  ======  ==========================================
Exception                   Status  Body
==========================  ======  ==========================================
``ValidationError``         400     ``{"error": <message>}``
anything else               500     ``{"error": "Internal server error"}``
==========================  ======  ==========================================

Details of 500-class failures are written to the log, never to the
response.

Request parameters that FastAPI itself rejects (for example a plain text
value where a file is expected) are turned into a ``ValidationError`` with
the message registered for the route, so callers never see FastAPI's 422
body.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from genai_gateway.core.errors import RemoteServiceError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_REQUEST_MESSAGE = "Invalid request"


def error_response(exc: Exception) -> JSONResponse:
    """Map *exc* to the JSON response returned to the caller.

    Args:
        exc: The exception raised while handling a request.

    Returns:
        A 400 response carrying the validation message, or a generic 500.
    """
    if isinstance(exc, ValidationError):
        logger.warning(f"Validation error: {exc}")
        return JSONResponse(status_code=400, content={"error": str(exc)})

    logger.error(f"Request failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


async def _handle(request: Request, exc: Exception) -> JSONResponse:
    return error_response(exc)


async def _catch_unhandled(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    # Answering here keeps ServerErrorMiddleware from re-raising and logging twice.
    try:
        return await call_next(request)
    except Exception as e:
        return error_response(e)


def register_error_handlers(app: FastAPI, route_messages: Mapping[str, str] | None = None) -> None:
    """Route every gateway failure on *app* through :func:`error_response`.

    Args:
        app: Application to configure.
        route_messages: Validation message to report, keyed by request path,
            when FastAPI rejects a request's parameters before the route
            runs.  Paths not listed get a generic message.
    """
    messages = dict(route_messages or {})

    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug(f"Rejected parameters for {request.url.path}: {exc.errors()}")
        message = messages.get(request.url.path, INVALID_REQUEST_MESSAGE)
        return error_response(ValidationError(message))

    for exc_class in (ValidationError, RemoteServiceError, OSError):
        app.add_exception_handler(exc_class, _handle)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.middleware("http")(_catch_unhandled)
