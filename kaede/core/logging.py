"""Structlog configuration.

structlog events and plain stdlib records (uvicorn, cassandra-driver, httpx)
share one processor chain and one set of handlers:

- console: colored key-value output, or JSON when ``LOG_FORMAT=json``
- ``<app>.log``: every record at the configured level, JSON, rotated
- ``<app>.error.log``: errors only, JSON, rotated

Request identifiers from ``kaede.core.context`` are added to each event, and
values under secret-looking keys (comment passwords, admin secrets, the Ghost
key) are masked before rendering.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from kaede.core.context import get_context


if TYPE_CHECKING:
    from kaede.config.settings import Settings


SENSITIVE_KEYS = (
    "password",
    "passwd",
    "secret",
    "token",
    "credential",
    "api_key",
    "ghost_key",
    "authorization",
)

NOISY_LOGGERS = ("uvicorn.access", "cassandra", "httpx", "httpcore")

_MASK = "***"


def add_request_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add request_id / trace_id / correlation_id to the event."""
    for key, value in get_context().items():
        event_dict.setdefault(key, value)
    return event_dict


def _is_sensitive(key: str) -> bool:
    key = key.lower()
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)


def _mask(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _mask(str(k), v) for k, v in value.items()}
    if value and _is_sensitive(key):
        return _MASK
    return value


def mask_secrets(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace values stored under secret-looking keys, nested dicts included."""
    return {key: _mask(key, value) for key, value in event_dict.items()}


def _pre_chain(include_caller_info: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_request_context,
        mask_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if include_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                }
            )
        )
    return processors


def _attach(
    root: logging.Logger,
    handler: logging.Handler,
    level: str,
    renderer: Processor,
    pre_chain: list[Processor],
) -> None:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=pre_chain,
        )
    )
    root.addHandler(handler)


def _rotating_file(path: Path, settings: "Settings") -> RotatingFileHandler:
    return RotatingFileHandler(
        filename=path,
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )


def configure_structlog(
    settings: "Settings",
    log_dir: Path | str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Application settings.
        log_dir: Directory for log files. Defaults to ``settings.log_dir``.
    """
    log_dir = Path(log_dir if log_dir is not None else settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    level = settings.log_level
    pre_chain = _pre_chain(settings.log_include_caller_info)

    if settings.log_format == "json":
        console_renderer: Processor = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    json_renderer = structlog.processors.JSONRenderer()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    _attach(root, logging.StreamHandler(sys.stdout), level, console_renderer, pre_chain)
    _attach(
        root,
        _rotating_file(log_dir / f"{settings.app_name}.log", settings),
        level,
        json_renderer,
        pre_chain,
    )
    _attach(
        root,
        _rotating_file(log_dir / f"{settings.app_name}.error.log", settings),
        "ERROR",
        json_renderer,
        pre_chain,
    )

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger."""
    return structlog.get_logger(name)
