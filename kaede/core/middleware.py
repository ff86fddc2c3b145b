"""Request middleware: identifiers, access log and timing."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from kaede.core.context import bind_request_context, clear_context


logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def trace_id_from_headers(request: Request) -> str | None:
    """Get the trace ID from ``X-Trace-ID`` or a W3C ``traceparent`` header.

    traceparent is ``{version}-{trace-id}-{parent-id}-{flags}``.
    """
    trace_id = request.headers.get("x-trace-id")
    if trace_id:
        return trace_id

    parts = request.headers.get("traceparent", "").split("-")
    return parts[1] if len(parts) >= 2 and parts[1] else None


def client_ip(request: Request) -> str | None:
    """Get the client address, honouring reverse proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.headers.get("x-real-ip"):
        return request.headers["x-real-ip"]
    return request.client.host if request.client else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request identifiers for logging and echo the request ID back.

    Blog readers hit the comment routes from the theme's scripts, so the
    access log records the client address along with method, path and
    timing. Health probes are left out.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or ("/health",))

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = bind_request_context(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            trace_id=trace_id_from_headers(request),
            correlation_id=request.headers.get("x-correlation-id"),
        )
        request.state.request_id = request_id

        log = logger.bind(method=request.method, path=request.url.path)
        access_log = self.log_requests and not request.url.path.startswith(
            self.exclude_paths
        )
        if access_log:
            log.info("request_started", client_ip=client_ip(request))

        started = time.perf_counter()
        try:
            response = await call_next(request)

            if access_log:
                emit = log.warning if response.status_code >= 500 else log.info
                emit(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(started),
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            log.exception(
                "request_failed",
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
            )
            raise
        finally:
            clear_context()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
