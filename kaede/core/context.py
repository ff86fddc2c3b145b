"""Per-request identifiers kept in contextvars.

The middleware binds them when a request comes in; log processors and error
handlers read them back without the values being threaded through calls.
"""

from contextvars import ContextVar
from uuid import uuid4


_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_CONTEXT_VARS = {
    "request_id": _request_id,
    "trace_id": _trace_id,
    "correlation_id": _correlation_id,
}


def bind_request_context(
    request_id: str | None = None,
    trace_id: str | None = None,
    correlation_id: str | None = None,
) -> str:
    """Bind identifiers for the current request.

    Args:
        request_id: Incoming request ID; a new one is generated when empty.
        trace_id: Distributed trace ID, if the caller sent one.
        correlation_id: Correlation ID, if the caller sent one.

    Returns:
        The request ID in effect.
    """
    request_id = request_id or uuid4().hex
    _request_id.set(request_id)
    _trace_id.set(trace_id or None)
    _correlation_id.set(correlation_id or None)
    return request_id


def get_request_id() -> str | None:
    """Get the current request ID."""
    return _request_id.get()


def get_context() -> dict[str, str]:
    """Get the identifiers bound to the current request (unset ones omitted)."""
    context = {name: var.get() for name, var in _CONTEXT_VARS.items()}
    return {name: value for name, value in context.items() if value}


def clear_context() -> None:
    """Unbind all request identifiers."""
    for var in _CONTEXT_VARS.values():
        var.set(None)
