"""
Core Pipechain Package

Contains the pipeline engine, class factory, configuration and error handling.
"""

from pipechain.core.exceptions import (
    PipechainError,
    InvalidPipe,
    InvalidPipeline,
    MiddlewareInterfaceNotFound,
    InvalidMiddlewareForPipe,
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    RecoverySuggestion
)

from pipechain.core.error_context import (
    ErrorReporter,
    get_error_reporter,
    report_error,
    generate_user_message
)

from pipechain.core.factory import ClassFactory, get_default_factory

__all__ = [
    # Exception classes
    'PipechainError',
    'InvalidPipe',
    'InvalidPipeline',
    'MiddlewareInterfaceNotFound',
    'InvalidMiddlewareForPipe',
    'ConfigurationError',
    'ErrorCode',
    'ErrorContext',
    'RecoverySuggestion',

    # Error reporting
    'ErrorReporter',
    'get_error_reporter',
    'report_error',
    'generate_user_message',

    # Class resolution
    'ClassFactory',
    'get_default_factory'
]
