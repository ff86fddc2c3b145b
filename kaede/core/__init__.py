# Core infrastructure
from kaede.core.context import (
    bind_request_context,
    clear_context,
    get_context,
    get_request_id,
)
from kaede.core.logging import configure_structlog, get_logger
from kaede.core.middleware import RequestContextMiddleware


__all__ = [
    "RequestContextMiddleware",
    "bind_request_context",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
]
