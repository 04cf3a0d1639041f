"""Core primitives: errors, structured logging, settings, retry and write channels.

Modules
-------
errors          ColumnSpineError hierarchy and MissingSchemaWarning
logging         structlog configuration and get_logger()
settings        ColumnSpineSettings (pydantic-settings)
retry           Backoff strategies and RetryContext
channels        Inline and serialized write channels
"""

from .errors import (
    ColumnSpineError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    MissingSchemaWarning,
    PipelineStateError,
    UnsupportedOperationError,
)
from .logging import configure_logging, get_logger

__all__ = [
    "ColumnSpineError",
    "ConfigError",
    "DatabaseConnectionError",
    "DatabaseError",
    "MissingSchemaWarning",
    "PipelineStateError",
    "UnsupportedOperationError",
    "configure_logging",
    "get_logger",
]
