"""
Pipeline Executor

Sends a subject through an ordered chain of pipes following the Chain of
Responsibility pattern. Pipes are resolved lazily and composed with a right
fold, so the first registered pipe runs first and decides if and when the
remainder of the chain runs.
"""

import logging
import time
from functools import reduce
from typing import Any, Callable, List, Optional, Tuple

from pipechain.core.config.models import PipelineSettings
from pipechain.core.error_context import get_error_reporter
from pipechain.core.exceptions import InvalidPipe, InvalidPipeline, ErrorCode, ErrorContext
from pipechain.core.factory import ClassFactory, get_default_factory
from pipechain.core.pipeline.descriptors import classify_pipe, describe
from pipechain.core.pipeline.interfaces import ChainResult


logger = logging.getLogger("pipechain.pipeline")


def _identity(subject: Any) -> Any:
    return subject


class Pipeline:
    """
    Pipeline to follow the Chain of Responsibility design pattern.

    Configure it with ``send()``, ``through()``/``pipe()``, ``use()`` and
    ``seal_with()`` (each returns the pipeline), then run it with ``then()``
    or ``then_return()``.

    Usage::

        result = (Pipeline()
                  .send(" convert this ")
                  .through([strip_pipe, "app.pipes.UppercasePipe"])
                  .then_return())

    One pipeline instance runs one subject through one chain; it holds no
    locks and must not be shared between threads while running.
    """

    def __init__(self, settings: Optional[PipelineSettings] = None,
                 factory: Optional[ClassFactory] = None):
        """
        Initialize the pipeline.

        Args:
            settings: Execution settings (reporting of sealed failures)
            factory: Factory resolving pipe class names, defaults to the
                process-wide factory
        """
        self.settings = settings or PipelineSettings()
        self.factory = factory
        self._subject: Any = None
        self._pipes: List[Any] = []
        self._use: Tuple[Any, ...] = ()
        self._catcher: Optional[Callable[..., Any]] = None

    @staticmethod
    def resolve(pipe: Any, factory: Optional[ClassFactory] = None) -> Callable[..., Any]:
        """
        Resolve a pipe descriptor into a callable ``(subject, next, *use)``.

        Args:
            pipe: Pipe class or class name, Pipe instance, or callable
            factory: Factory used for class names, defaults to the process-wide one

        Returns:
            The bound ``handle`` of the pipe, or the callable itself

        Raises:
            InvalidPipe: When the pipe is none of the supported shapes
            InvalidPipeline: When resolving or constructing the pipe fails
        """
        factory = factory or get_default_factory()
        try:
            return classify_pipe(pipe, factory).to_callable(factory)
        except (InvalidPipe, InvalidPipeline):
            raise
        except Exception as e:
            raise InvalidPipeline(
                e,
                error_code=ErrorCode.PIPELINE_RESOLUTION_FAILED,
                context=ErrorContext(operation="resolve", pipe=describe(pipe))
            ) from e

    def use(self, *args: Any) -> 'Pipeline':
        """Set the extra arguments passed to every pipe after ``subject`` and ``next``."""
        self._use = args
        return self

    def send(self, subject: Any) -> 'Pipeline':
        """Register the subject to be sent through the pipes."""
        self._subject = subject
        return self

    def through(self, pipes: List[Any]) -> 'Pipeline':
        """
        Register the pipes that will transform the subject.

        Pipes added with ``pipe()`` before this call are deferred: they run
        after the given pipes, in the order they were added.
        """
        deferred = self._pipes
        self._pipes = list(pipes)

        for pipe in deferred:
            self.pipe(pipe)

        return self

    def pipe(self, pipe: Any) -> 'Pipeline':
        """Append one pipe to the chain."""
        self._pipes.append(pipe)
        return self

    def seal_with(self, fallback: Callable[..., Any]) -> 'Pipeline':
        """
        Register a fallback ``(error, *use) -> result`` for failing pipes.

        The fallback receives every failure except InvalidPipe, which always
        propagates.
        """
        self._catcher = fallback
        return self

    def process(self, destination: Callable[[Any], Any] = _identity) -> ChainResult:
        """
        Run the chain and capture the outcome instead of raising.

        Args:
            destination: Final transformation receiving the subject from the last
                pipe; it is called with the subject only, never with the extra args

        Returns:
            ChainResult holding the value or the reclassified failure
        """
        start_time = time.time()
        pipe_count = len(self._pipes)

        try:
            chain = reduce(self._carry, reversed(self._pipes), self._guard(destination))
            logger.debug(f"Running {self!r}")
            value = chain(self._subject)
        except (InvalidPipe, InvalidPipeline) as e:
            return ChainResult.failed(e, pipe_count=pipe_count,
                                      execution_time=time.time() - start_time)
        except Exception as e:
            error = InvalidPipeline(e, subject=self._subject)
            error.__cause__ = e
            return ChainResult.failed(error, pipe_count=pipe_count,
                                      execution_time=time.time() - start_time)

        return ChainResult.ok(value, pipe_count=pipe_count,
                              execution_time=time.time() - start_time)

    def then(self, destination: Callable[[Any], Any]) -> Any:
        """
        Get the transformed subject after passing it through one last callable.

        The destination receives only the subject, whether or not pipes or
        extra arguments are registered.

        Raises:
            InvalidPipe: When a pipe could not be resolved
            InvalidPipeline: When a pipe failed and no fallback is registered
        """
        return self._seal(self.process(destination))

    def then_return(self) -> Any:
        """Pass the subject through the pipes and return the transformed result."""
        return self.then(_identity)

    def _seal(self, result: ChainResult) -> Any:
        if result.success:
            return result.value

        error = result.error
        # InvalidPipe is a defect in the chain itself and is never sealed.
        if isinstance(error, InvalidPipe) or self._catcher is None:
            raise error

        if self.settings.report_sealed:
            get_error_reporter().report_error(error, level=self.settings.seal_log_level)
        logger.debug(f"Sealed {type(error).__name__}: {error}")

        return self._catcher(error, *self._use)

    def _carry(self, next_pipe: Callable[[Any], Any], current: Any) -> Callable[[Any], Any]:
        """Get a callable that wraps the current pipe around the rest of the chain."""
        def wrapped(subject: Any) -> Any:
            try:
                return self.resolve(current, self.factory)(subject, next_pipe, *self._use)
            except (InvalidPipe, InvalidPipeline):
                raise
            except Exception as e:
                # Anything raised while the pipe handles the subject; keep the
                # subject it received so the caller can inspect it.
                raise InvalidPipeline(
                    e,
                    subject=subject,
                    context=ErrorContext(operation="handle", pipe=describe(current))
                ) from e

        return wrapped

    @staticmethod
    def _guard(destination: Callable[[Any], Any]) -> Callable[[Any], Any]:
        def final(subject: Any) -> Any:
            try:
                return destination(subject)
            except (InvalidPipe, InvalidPipeline):
                raise
            except Exception as e:
                raise InvalidPipeline(
                    e,
                    subject=subject,
                    context=ErrorContext(operation="then", stage="destination")
                ) from e

        return final

    def __len__(self) -> int:
        return len(self._pipes)

    def __repr__(self) -> str:
        names = [describe(pipe) for pipe in self._pipes]
        return f"Pipeline({' -> '.join(names)})"

