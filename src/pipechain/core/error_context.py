"""
Error Reporting

Builds debug reports and user-facing messages for pipeline failures and fans
reports out to registered handlers. Used by the pipeline when a failure is
sealed by a fallback, so that swallowed failures still leave a trace.
"""

import logging
import time
import traceback
from dataclasses import asdict
from datetime import datetime
from typing import Dict, Any, Optional, List, Callable

from pipechain.core.exceptions import PipechainError, InvalidPipeline, ErrorCode, ErrorContext


logger = logging.getLogger("pipechain.errors")


class ErrorReporter:
    """
    Handles error reporting and message generation.
    """

    def __init__(self):
        self.report_handlers: List[Callable[[Dict[str, Any]], None]] = []

    def register_report_handler(self, handler: Callable[[Dict[str, Any]], None]) -> None:
        """Register a handler for error reports."""
        self.report_handlers.append(handler)

    def clear_report_handlers(self) -> None:
        """Remove all registered report handlers."""
        self.report_handlers.clear()

    def generate_user_message(self, error: Exception, context: Optional[ErrorContext] = None) -> str:
        """
        Generate a user-friendly error message.

        Args:
            error: The exception that occurred
            context: Error context information, defaults to the error's own

        Returns:
            User-friendly error message
        """
        if context is None:
            context = getattr(error, 'context', None) or ErrorContext()

        message_parts = []

        if isinstance(error, PipechainError):
            message_parts.append(f"{type(error).__name__}: {error.message}")

            if context.operation:
                message_parts.append(f"   Operation: {context.operation}")
            if context.stage:
                message_parts.append(f"   Stage: {context.stage}")
            if context.pipe:
                message_parts.append(f"   Pipe: {context.pipe}")
            if isinstance(error, InvalidPipeline) and error.cause is not None:
                message_parts.append(f"   Caused by: {type(error.cause).__name__}")

            if error.error_code != ErrorCode.UNKNOWN_ERROR:
                message_parts.append(f"   Error Code: {error.error_code.value}")
            if context.correlation_id:
                message_parts.append(f"   Correlation ID: {context.correlation_id}")

            if error.suggestions:
                message_parts.append("\nSuggested solutions:")
                for i, suggestion in enumerate(error.suggestions[:3], 1):
                    message_parts.append(f"   {i}. {suggestion.action}")
                    message_parts.append(f"      {suggestion.description}")
        else:
            message_parts.append(f"An unexpected error occurred: {error}")
            if context.correlation_id:
                message_parts.append(f"   Correlation ID: {context.correlation_id}")

        return "\n".join(message_parts)

    def generate_debug_report(self, error: Exception, context: Optional[ErrorContext] = None) -> Dict[str, Any]:
        """
        Generate debug information for error analysis.

        Args:
            error: The exception that occurred
            context: Error context information, defaults to the error's own

        Returns:
            Debug report dictionary
        """
        if context is None:
            context = getattr(error, 'context', None) or ErrorContext()

        report = {
            'timestamp': time.time(),
            'datetime': datetime.now().isoformat(),
            'error': {
                'type': type(error).__name__,
                'message': str(error),
                'module': getattr(error, '__module__', None)
            },
            'context': asdict(context),
        }

        if isinstance(error, PipechainError):
            report['pipechain'] = {
                'error_code': error.error_code.value,
                'recoverable': error.recoverable,
                'suggestions': [asdict(s) for s in error.suggestions],
            }
            if isinstance(error, InvalidPipeline) and error.has_subject():
                report['pipechain']['subject'] = repr(error.subject)

        if error.__traceback__ is not None:
            report['stack_trace'] = traceback.format_exception(
                type(error), error, error.__traceback__
            )

        return report

    def report_error(self, error: Exception, context: Optional[ErrorContext] = None, level: str = "error") -> None:
        """
        Report an error through all registered handlers.

        Args:
            error: The exception that occurred
            context: Error context information
            level: Log level (debug, info, warning, error, critical)
        """
        report = self.generate_debug_report(error, context)
        report['level'] = level

        for handler in self.report_handlers:
            try:
                handler(report)
            except Exception as handler_error:
                logger.error(f"Error report handler failed: {handler_error}")

        log_func = getattr(logger, level, logger.error)
        log_func(f"Error reported: {type(error).__name__}: {error}")


# Global instance
_global_error_reporter = ErrorReporter()


def get_error_reporter() -> ErrorReporter:
    """Get the global error reporter."""
    return _global_error_reporter


def report_error(error: Exception, context: Optional[ErrorContext] = None, level: str = "error") -> None:
    """Convenience function to report an error."""
    _global_error_reporter.report_error(error, context, level)


def generate_user_message(error: Exception, context: Optional[ErrorContext] = None) -> str:
    """Convenience function to generate user-friendly error message."""
    return _global_error_reporter.generate_user_message(error, context)
