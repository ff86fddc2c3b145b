"""Exception handlers producing the API's error envelope.

- client errors (``ApiError``): 422 ``{"ok": false, "reason": <code>}``
- HTTP errors (unknown route, service unavailable): their status, ``{"ok": false}``
- anything else: 500 ``{"ok": false, "reason": "internal-server"}``, details
  only in the logs

Every envelope carries the request ID so a reader's report can be matched to
the server log.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kaede.core.context import get_request_id
from kaede.core.errors import ApiError, InvalidBodyError


logger = structlog.get_logger(__name__)

INTERNAL_SERVER_REASON = "internal-server"


def error_response(
    request: Request, status_code: int, reason: str | None = None
) -> ORJSONResponse:
    """Build an error envelope for the request."""
    content: dict[str, Any] = {"ok": False}
    if reason is not None:
        content["reason"] = reason
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    content["request_id"] = request_id
    return ORJSONResponse(status_code=status_code, content=content)


async def api_error_handler(request: Request, exc: ApiError) -> ORJSONResponse:
    """Expected client failure: reason code only, logged at info level."""
    logger.info(
        "api_error",
        reason=exc.code,
        method=request.method,
        path=request.url.path,
    )
    return error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, exc.code)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Framework-level validation failure, reported as an invalid body."""
    logger.info(
        "validation_error",
        errors=exc.errors(),
        method=request.method,
        path=request.url.path,
    )
    return await api_error_handler(request, InvalidBodyError())


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """Unknown routes, disallowed methods and unavailable services."""
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "http_error",
        status_code=exc.status_code,
        detail=str(exc.detail),
        method=request.method,
        path=request.url.path,
    )
    return error_response(request, exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Unexpected failure (store, Ghost, bug): logged with traceback, opaque reply."""
    logger.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error=str(exc),
        method=request.method,
        path=request.url.path,
    )
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_REASON
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
