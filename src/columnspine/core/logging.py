"""
Structured logging for columnspine.

structlog renders every event, and the stdlib ``logging`` tree carries it to
the output stream. The cassandra driver logs through stdlib loggers
(``cassandra.cluster``, ``cassandra.pool``); routing both through one
``ProcessorFormatter`` gives driver and pipeline events the same shape.

Architecture:
    ::

        columnspine logger (structlog.stdlib.BoundLogger)
            │  merge_contextvars → level → logger name → service
            ▼
        stdlib logging.Logger ──────────┐
                                        ▼
        cassandra.* stdlib loggers ──▶ root handler (ProcessorFormatter)
                                        │  ECS field names (JSON only)
                                        ▼
                                 JSONRenderer | ConsoleRenderer

Examples:
    >>> from columnspine.core.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", json_format=True, service="crawler")
    >>> logger = get_logger(__name__)
    >>> logger.info("batch_written", entity="Page", records=42)

Tags:
    logging, structlog, observability, columnspine
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "columnspine"
_HANDLER_NAME = "columnspine"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")

    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")

    return event_dict


def _remove_handler(root: logging.Logger) -> None:
    for handler in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(handler)
        handler.close()


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "columnspine",
    add_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for columnspine and the cassandra driver.

    Safe to call repeatedly; the previous columnspine handler is replaced.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
        stream: Output stream, defaults to stdout
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    stream = stream or sys.stdout
    if json_format is None:
        json_format = not stream.isatty()

    # Applied to structlog events before they reach stdlib, and to
    # stdlib records (driver logs) inside the formatter.
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service_metadata,
    ]
    if add_timestamp:
        pre_chain.append(structlog.processors.TimeStamper(fmt="iso"))

    render: list[Processor]
    if json_format:
        render = [
            _elasticsearch_compatible,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render = [structlog.dev.ConsoleRenderer(colors=stream.isatty())]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        # module-level loggers must follow reconfiguration
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
        )
    )

    root = logging.getLogger()
    _remove_handler(root)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))


def reset_logging() -> None:
    """Undo :func:`configure_logging`: structlog defaults, no columnspine handler."""
    global _SERVICE_NAME
    _SERVICE_NAME = "columnspine"
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    _remove_handler(root)
    root.setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(entity="Page", keyspace="crawl"):
            logger.info("schema_provisioned")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "reset_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
