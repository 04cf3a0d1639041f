"""
Structured error types for columnspine.

Every error raised by the pipeline extends :class:`ColumnSpineError` and
carries a category and a retry flag, so the write channel and callers can
decide whether an operation is worth attempting again.

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────┐
        │                     ColumnSpineError                        │
        │             (category, retryable, context, cause)           │
        ├────────────────────────────────────────────────────────────┤
        │  ConfigError            UnsupportedOperationError           │
        │  (CONFIG)               (UNSUPPORTED)                       │
        │                                                             │
        │  DatabaseError          DatabaseConnectionError             │
        │  (DATABASE)             (DATABASE, retryable)               │
        │       │                                                     │
        │  PipelineStateError                                         │
        └────────────────────────────────────────────────────────────┘

        MissingSchemaWarning (UserWarning) - non-fatal, entity skipped

Guardrails:
    ❌ DON'T: Catch driver errors inside the pipeline and re-raise as strings
    ✅ DO: Let driver errors propagate; wrap only with ``cause=``

Tags:
    error-handling, exception-hierarchy, retry-logic, columnspine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"
    DATABASE = "DATABASE"
    UNSUPPORTED = "UNSUPPORTED"
    PIPELINE = "PIPELINE"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error."""

    entity: str | None = None
    keyspace: str | None = None
    table: str | None = None
    statement: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key in ("entity", "keyspace", "table", "statement"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ColumnSpineError(Exception):
    """
    Base exception for all columnspine errors.

    Subclasses set ``default_category`` and ``default_retryable`` so that
    callers never have to pass them explicitly.

    Examples:
        >>> error = ColumnSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ColumnSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ConfigError("No table").with_context(entity="Page")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ColumnSpineError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# UNSUPPORTED OPERATIONS
# =============================================================================


class UnsupportedOperationError(ColumnSpineError):
    """The wide-column store has no implementation for the requested operation."""

    default_category = ErrorCategory.UNSUPPORTED
    default_retryable = False


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(ColumnSpineError):
    """Store query or session error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class DatabaseConnectionError(DatabaseError):
    """Could not reach the cluster."""

    default_retryable = True


class PipelineStateError(ColumnSpineError):
    """Pipeline used outside its init/dispose lifecycle."""

    default_category = ErrorCategory.PIPELINE
    default_retryable = False


# =============================================================================
# WARNINGS
# =============================================================================


class MissingSchemaWarning(UserWarning):
    """Entity definition carries no table descriptor and was skipped."""


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, ColumnSpineError):
        return error.retryable
    retryable_types = (
        ConnectionError,
        ConnectionResetError,
        ConnectionRefusedError,
        BrokenPipeError,
    )
    return isinstance(error, retryable_types)


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, ColumnSpineError):
        return error.category
    if isinstance(error, (ConnectionError, OSError)):
        return ErrorCategory.DATABASE
    if isinstance(error, NotImplementedError):
        return ErrorCategory.UNSUPPORTED
    return ErrorCategory.UNKNOWN


def error_fields(error: Exception) -> dict[str, Any]:
    """Flatten any exception into log fields.

    Driver exceptions get the same keys as :meth:`ColumnSpineError.to_dict`.
    """
    if isinstance(error, ColumnSpineError):
        return error.to_dict()
    return {
        "error_type": type(error).__name__,
        "message": str(error),
        "category": categorize_error(error).value,
        "retryable": is_retryable(error),
    }


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ColumnSpineError",
    "ConfigError",
    "InvalidConfigError",
    "UnsupportedOperationError",
    "DatabaseError",
    "DatabaseConnectionError",
    "PipelineStateError",
    "MissingSchemaWarning",
    "is_retryable",
    "categorize_error",
    "error_fields",
]
