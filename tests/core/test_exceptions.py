"""
Tests for the Pipechain exception hierarchy.
"""

import pytest

from pipechain.core.exceptions import (
    PipechainError, InvalidPipe, InvalidPipeline, MiddlewareInterfaceNotFound,
    InvalidMiddlewareForPipe, ConfigurationError, ErrorCode, ErrorContext,
    RecoverySuggestion, config_error
)


class TestPipechainError:
    """Test the base exception."""

    def test_defaults(self):
        """Test default code, context and correlation id."""
        error = PipechainError("Something failed")

        assert str(error) == "Something failed"
        assert error.error_code == ErrorCode.UNKNOWN_ERROR
        assert error.recoverable is True
        assert len(error.context.correlation_id) == 8
        assert error.cause is None

    def test_suggestions_sorted_by_priority(self):
        """Test suggestions are kept in priority order."""
        error = PipechainError("Something failed")
        error.add_suggestion(RecoverySuggestion("Second", "later", priority=2))
        error.add_suggestion(RecoverySuggestion("First", "sooner", priority=1))

        assert [s.action for s in error.suggestions] == ["First", "Second"]

    def test_user_message(self):
        """Test the user message contains the code and suggestions."""
        error = PipechainError("Something failed", error_code=ErrorCode.INTERNAL_ERROR)
        error.add_suggestion(RecoverySuggestion("Retry", "Run it again"))

        message = error.get_user_message()

        assert "Error: Something failed" in message
        assert "Error Code: 9001" in message
        assert "1. Retry" in message

    def test_explicit_correlation_id_kept(self):
        """Test a correlation id in the given context is not replaced."""
        error = PipechainError("Something failed", context=ErrorContext(correlation_id="abc123"))

        assert error.context.correlation_id == "abc123"
        assert "Correlation ID: abc123" in error.get_user_message()

    def test_suggestions_given_at_construction_sorted(self):
        error = PipechainError("Something failed", suggestions=[
            RecoverySuggestion("Later", "b", priority=3),
            RecoverySuggestion("Sooner", "a", priority=1),
        ])
        assert error.suggestions[0].action == "Sooner"


class TestInvalidPipe:
    """Test the error for unclassifiable pipes."""

    def test_from_class_name(self):
        """Test the message for a class name."""
        error = InvalidPipe.from_pipe("app.pipes.Missing")

        assert str(error) == "Invalid pipe classname given: app.pipes.Missing."
        assert error.pipe == "app.pipes.Missing"
        assert error.context.pipe == "app.pipes.Missing"
        assert error.error_code == ErrorCode.PIPE_CLASS_NOT_FOUND

    def test_from_value(self):
        """Test the message names the value type."""
        error = InvalidPipe.from_pipe(42)

        assert str(error) == "Invalid pipe given: int."
        assert error.error_code == ErrorCode.PIPE_INVALID
        assert error.context.pipe == "42"

    def test_classification(self):
        """Test InvalidPipe is a non-recoverable type error."""
        error = InvalidPipe("bad pipe")

        assert isinstance(error, TypeError)
        assert isinstance(error, PipechainError)
        assert not isinstance(error, InvalidPipeline)
        assert error.recoverable is False
        assert error.error_code == ErrorCode.PIPE_INVALID
        assert error.suggestions


class TestInvalidPipeline:
    """Test the wrapper for failures while running a chain."""

    def test_wraps_previous(self):
        """Test the message and cause come from the wrapped failure."""
        previous = KeyError("missing")
        error = InvalidPipeline(previous, subject={"a": 1})

        assert str(error) == str(previous)
        assert error.cause is previous
        assert error.error_code == ErrorCode.PIPELINE_EXECUTION_FAILED
        assert error.has_subject() is True
        assert error.subject == {"a": 1}

    def test_without_subject(self):
        """Test a failure outside a running step has no subject."""
        error = InvalidPipeline(RuntimeError("resolution"))

        assert error.has_subject() is False
        assert error.subject is None

    def test_falsy_subject_is_kept(self):
        """Test falsy subjects are distinguished from no subject."""
        for subject in (None, 0, "", []):
            assert InvalidPipeline(ValueError(), subject=subject).has_subject() is True

    def test_custom_error_code(self):
        """Test the error code can be overridden."""
        error = InvalidPipeline(ValueError(), error_code=ErrorCode.PIPELINE_RESOLUTION_FAILED)
        assert error.error_code == ErrorCode.PIPELINE_RESOLUTION_FAILED


class TestMiddlewareErrors:
    """Test the bridge errors."""

    def test_interface_not_found(self):
        """Test the missing interface is recorded."""
        error = MiddlewareInterfaceNotFound("Cannot find interface.", interface="app.Middleware")

        assert isinstance(error, RuntimeError)
        assert error.error_code == ErrorCode.MIDDLEWARE_INTERFACE_NOT_FOUND
        assert error.context.user_context['interface'] == "app.Middleware"
        assert error.suggestions[0].action == "Register a middleware adapter"

    def test_invalid_middleware(self):
        """Test the offending middleware is recorded."""
        error = InvalidMiddlewareForPipe("Invalid middleware.", middleware=True)

        assert isinstance(error, TypeError)
        assert error.middleware is True
        assert error.context.pipe == "True"
        assert error.error_code == ErrorCode.MIDDLEWARE_INVALID


class TestConfigurationError:
    """Test configuration errors."""

    @pytest.mark.parametrize("code,action", [
        (ErrorCode.CONFIG_FILE_NOT_FOUND, "Check the configuration path"),
        (ErrorCode.CONFIG_INVALID_VALUE, "Check configuration values"),
        (ErrorCode.CONFIG_SCHEMA_VALIDATION, "Check configuration values"),
    ])
    def test_suggestions_by_code(self, code, action):
        """Test each code gets its suggestion."""
        error = ConfigurationError("bad config", error_code=code)
        assert error.suggestions[0].action == action

    def test_config_error_helper(self):
        """Test the helper records the key and value."""
        error = config_error("bad value", key="pipeline.seal_log_level", config_value="loud",
                             error_code=ErrorCode.CONFIG_INVALID_VALUE)

        assert error.context.user_context == {
            'config_key': "pipeline.seal_log_level",
            'config_value': "loud",
        }
        assert error.context.operation == "load_config"
