"""
Pipeline Interfaces

Abstract base class for pipes and the result object produced by a pipeline
run. A pipe receives the subject together with a continuation (``next``) that
represents the remainder of the chain.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional


NextPipe = Callable[[Any], Any]
"""Signature for the ``next`` continuation passed to each pipe."""


class Pipe(ABC):
    """
    Abstract base class for all pipes.

    A pipe transforms the subject and decides whether to continue the chain:

    1. Transform the subject and ``return next(subject)`` to pass through.
    2. Return a value without calling ``next`` to short-circuit the chain.
    3. Call ``next(subject)`` and transform its result to post-process.
    """

    @abstractmethod
    def handle(self, subject: Any, next: NextPipe, *use: Any) -> Any:
        """
        Handle the given subject and return the transformed data.

        Args:
            subject: The subject to be transformed by the pipe
            next: Continuation invoking the remainder of the chain
            *use: Extra arguments registered on the pipeline with ``use()``

        Returns:
            The transformed subject
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


@dataclass
class ChainResult:
    """
    Outcome of running a composed chain.

    Attributes:
        success: Whether the chain returned a value
        value: The value returned by the chain on success
        error: The reclassified failure (InvalidPipe or InvalidPipeline)
        pipe_count: Number of pipes composed into the chain
        execution_time: Time taken to run the chain in seconds
    """
    success: bool = True
    value: Any = None
    error: Optional[Exception] = None
    pipe_count: int = 0
    execution_time: float = 0.0

    @classmethod
    def ok(cls, value: Any, **kwargs) -> 'ChainResult':
        """Build a successful result."""
        return cls(success=True, value=value, **kwargs)

    @classmethod
    def failed(cls, error: Exception, **kwargs) -> 'ChainResult':
        """Build a failed result."""
        return cls(success=False, error=error, **kwargs)

    def unwrap(self) -> Any:
        """Return the value, raising the failure if the chain failed."""
        if not self.success:
            raise self.error
        return self.value
