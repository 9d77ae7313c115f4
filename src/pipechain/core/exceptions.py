"""
Core Exception Hierarchy for Pipechain

Provides error classification with error codes, recovery suggestions and
context information for pipe resolution, pipeline execution and the
middleware bridge.
"""

import time
import uuid
from enum import Enum
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class ErrorCode(Enum):
    """Standard error codes for different error categories."""

    # Pipe resolution errors (1000-1999)
    PIPE_INVALID = 1001
    PIPE_CLASS_NOT_FOUND = 1002
    PIPE_CONSTRUCTION_FAILED = 1003

    # Pipeline execution errors (2000-2999)
    PIPELINE_EXECUTION_FAILED = 2001
    PIPELINE_RESOLUTION_FAILED = 2002

    # Middleware bridge errors (3000-3999)
    MIDDLEWARE_INTERFACE_NOT_FOUND = 3001
    MIDDLEWARE_INVALID = 3002

    # Configuration errors (4000-4999)
    CONFIG_INVALID_FORMAT = 4001
    CONFIG_INVALID_VALUE = 4002
    CONFIG_FILE_NOT_FOUND = 4003
    CONFIG_SCHEMA_VALIDATION = 4004

    # Generic/unknown errors (9000-9999)
    UNKNOWN_ERROR = 9000
    INTERNAL_ERROR = 9001


@dataclass
class ErrorContext:
    """Where in the chain a failure happened."""

    operation: str = ""
    stage: str = ""
    pipe: Optional[str] = None
    correlation_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    user_context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RecoverySuggestion:
    """A fix the caller can apply, lowest priority number first."""

    action: str
    description: str
    url: Optional[str] = None
    priority: int = 1


class PipechainError(Exception):
    """
    Base exception for all Pipechain errors.

    Every error gets a short correlation id so a sealed failure in the logs
    can be matched with the report handed to report handlers.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        recoverable: bool = True,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.context.correlation_id = self.context.correlation_id or uuid.uuid4().hex[:8]
        self.cause = cause
        self.recoverable = recoverable
        self.suggestions = sorted(suggestions or [], key=lambda s: s.priority)

    def add_suggestion(self, suggestion: RecoverySuggestion) -> None:
        self.suggestions.append(suggestion)
        self.suggestions.sort(key=lambda s: s.priority)

    def get_user_message(self) -> str:
        """Message with the error code and the top three suggestions."""
        lines = [f"Error: {self.message}"]
        if self.error_code is not ErrorCode.UNKNOWN_ERROR:
            lines.append(f"Error Code: {self.error_code.value}")
        lines.append(f"Correlation ID: {self.context.correlation_id}")

        if self.suggestions:
            lines.append("\nSuggested solutions:")
            for i, suggestion in enumerate(self.suggestions[:3], 1):
                lines.extend([f"  {i}. {suggestion.action}", f"     {suggestion.description}"])

        return "\n".join(lines)


class InvalidPipe(PipechainError, TypeError):
    """
    Raised when a pipe descriptor cannot be classified.

    This is a configuration defect of the chain itself. It is never sealed
    by a pipeline fallback.
    """

    def __init__(self, message: str, pipe: Any = None, **kwargs):
        context = kwargs.get('context') or ErrorContext(operation="resolve")
        if pipe is not None:
            context.pipe = pipe if isinstance(pipe, str) else repr(pipe)

        kwargs['context'] = context
        kwargs.setdefault('error_code', ErrorCode.PIPE_INVALID)
        kwargs.setdefault('recoverable', False)

        super().__init__(message, **kwargs)
        self.pipe = pipe

        self.add_suggestion(RecoverySuggestion(
            action="Check the pipe descriptor",
            description="A pipe must be a Pipe instance, a callable accepting "
                        "(subject, next, *use) or an importable Pipe class name.",
            priority=1
        ))

    @classmethod
    def from_pipe(cls, pipe: Any) -> 'InvalidPipe':
        """Create the error for the offending pipe value."""
        if isinstance(pipe, str):
            return cls(f"Invalid pipe classname given: {pipe}.", pipe=pipe,
                       error_code=ErrorCode.PIPE_CLASS_NOT_FOUND)
        return cls(f"Invalid pipe given: {type(pipe).__name__}.", pipe=pipe)


_NO_SUBJECT = object()


class InvalidPipeline(PipechainError):
    """
    Raised when an unexpected failure occurs while resolving or running a pipe.

    Wraps the original failure (also available as ``__cause__``) and keeps its
    message. When raised from a running step, the subject that step received
    is kept for inspection.
    """

    def __init__(self, previous: BaseException, subject: Any = _NO_SUBJECT, **kwargs):
        kwargs.setdefault('error_code', ErrorCode.PIPELINE_EXECUTION_FAILED)
        kwargs['cause'] = previous

        super().__init__(str(previous), **kwargs)
        self._subject = subject

    def has_subject(self) -> bool:
        """Whether the in-flight subject was captured."""
        return self._subject is not _NO_SUBJECT

    @property
    def subject(self) -> Any:
        """The subject being processed when the failure occurred, if any."""
        return None if self._subject is _NO_SUBJECT else self._subject


class MiddlewareInterfaceNotFound(PipechainError, RuntimeError):
    """Raised when no middleware interface can be loaded in this environment."""

    def __init__(self, message: str, interface: Optional[str] = None, **kwargs):
        context = kwargs.get('context') or ErrorContext(operation="to_middleware")
        if interface:
            context.user_context['interface'] = interface

        kwargs['context'] = context
        kwargs.setdefault('error_code', ErrorCode.MIDDLEWARE_INTERFACE_NOT_FOUND)
        kwargs.setdefault('recoverable', False)

        super().__init__(message, **kwargs)

        self.add_suggestion(RecoverySuggestion(
            action="Register a middleware adapter",
            description="Call set_middleware_adapter() with an importable interface "
                        "or fix bridge.default_middleware_interface in the configuration.",
            priority=1
        ))


class InvalidMiddlewareForPipe(PipechainError, TypeError):
    """Raised when a middleware descriptor cannot be classified."""

    def __init__(self, message: str, middleware: Any = None, **kwargs):
        context = kwargs.get('context') or ErrorContext(operation="to_middleware")
        if middleware is not None:
            context.pipe = middleware if isinstance(middleware, str) else repr(middleware)

        kwargs['context'] = context
        kwargs.setdefault('error_code', ErrorCode.MIDDLEWARE_INVALID)
        kwargs.setdefault('recoverable', False)

        super().__init__(message, **kwargs)
        self.middleware = middleware


class ConfigurationError(PipechainError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_INVALID_FORMAT,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext(operation="load_config")
        if config_key:
            context.user_context['config_key'] = config_key
            context.user_context['config_value'] = config_value

        kwargs['context'] = context
        kwargs['error_code'] = error_code
        kwargs.setdefault('recoverable', False)

        super().__init__(message, **kwargs)

        if error_code == ErrorCode.CONFIG_FILE_NOT_FOUND:
            self.add_suggestion(RecoverySuggestion(
                action="Check the configuration path",
                description="Verify the configuration file exists and is readable.",
                priority=1
            ))
        elif error_code in (ErrorCode.CONFIG_INVALID_VALUE, ErrorCode.CONFIG_SCHEMA_VALIDATION):
            self.add_suggestion(RecoverySuggestion(
                action="Check configuration values",
                description="Review the configuration for invalid values and correct them.",
                priority=1
            ))


def config_error(message: str, key: Optional[str] = None, **kwargs) -> ConfigurationError:
    """Create a configuration error with standard suggestions."""
    return ConfigurationError(message, config_key=key, **kwargs)
