"""Tests for columnspine.core.errors module."""

import pytest

from columnspine.core.errors import (
    ColumnSpineError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    MissingSchemaWarning,
    PipelineStateError,
    UnsupportedOperationError,
    categorize_error,
    error_fields,
    is_retryable,
)


class TestColumnSpineError:
    def test_defaults(self):
        error = ColumnSpineError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_cause_chained(self):
        original = ConnectionError("DNS failure")
        error = ColumnSpineError("wrapped", cause=original)
        assert error.cause is original
        assert error.__cause__ is original

    def test_with_context_known_and_metadata(self):
        error = ConfigError("No table").with_context(entity="Page", owner="crawler")
        assert error.context.entity == "Page"
        assert error.context.metadata == {"owner": "crawler"}

    def test_to_dict(self):
        error = UnsupportedOperationError("no upsert").with_context(entity="Page")
        d = error.to_dict()
        assert d["error_type"] == "UnsupportedOperationError"
        assert d["category"] == "UNSUPPORTED"
        assert d["retryable"] is False
        assert d["context"] == {"entity": "Page"}

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestSubclassDefaults:
    @pytest.mark.parametrize(
        ("cls", "category", "retryable"),
        [
            (ConfigError, ErrorCategory.CONFIG, False),
            (UnsupportedOperationError, ErrorCategory.UNSUPPORTED, False),
            (DatabaseError, ErrorCategory.DATABASE, False),
            (DatabaseConnectionError, ErrorCategory.DATABASE, True),
            (PipelineStateError, ErrorCategory.PIPELINE, False),
        ],
    )
    def test_defaults(self, cls, category, retryable):
        error = cls("x")
        assert error.category == category
        assert error.retryable is retryable

    def test_invalid_config_message(self):
        error = InvalidConfigError("port", "abc")
        assert error.key == "port"
        assert "Invalid configuration for port: 'abc'" in str(error)
        assert isinstance(error, ConfigError)

    def test_missing_schema_is_warning(self):
        assert issubclass(MissingSchemaWarning, UserWarning)


class TestUtilities:
    def test_is_retryable(self):
        assert is_retryable(DatabaseConnectionError("down")) is True
        assert is_retryable(ConfigError("bad")) is False
        assert is_retryable(ConnectionResetError()) is True
        assert is_retryable(ValueError()) is False

    def test_categorize(self):
        assert categorize_error(ConfigError("x")) == ErrorCategory.CONFIG
        assert categorize_error(ConnectionError()) == ErrorCategory.DATABASE
        assert categorize_error(NotImplementedError()) == ErrorCategory.UNSUPPORTED
        assert categorize_error(KeyError()) == ErrorCategory.UNKNOWN

    def test_empty_context_dict(self):
        assert ErrorContext().to_dict() == {}


class TestErrorFields:
    def test_columnspine_error_uses_to_dict(self):
        error = ConfigError("bad").with_context(entity="Page")
        assert error_fields(error) == error.to_dict()

    def test_foreign_error_gets_same_keys(self):
        fields = error_fields(ConnectionResetError("peer reset"))
        assert fields == {
            "error_type": "ConnectionResetError",
            "message": "peer reset",
            "category": "DATABASE",
            "retryable": True,
        }

    def test_unknown_error(self):
        fields = error_fields(KeyError("Url"))
        assert fields["category"] == "UNKNOWN"
        assert fields["retryable"] is False
