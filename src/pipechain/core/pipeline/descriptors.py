"""
Pipe Descriptors

A pipe (or middleware) can be registered in three shapes: a type identifier
that is constructed on demand, an object exposing the capability method, or a
plain callable. Classification turns the raw value into one of these variants;
anything else is rejected up front.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from pipechain.core.exceptions import InvalidPipe, InvalidPipeline, ErrorCode, ErrorContext
from pipechain.core.factory import ClassFactory, get_default_factory
from pipechain.core.pipeline.interfaces import Pipe


def is_invocable(value: Any) -> bool:
    """Whether ``value`` is a plain callable (classes are type identifiers)."""
    return callable(value) and not isinstance(value, type)


def describe(value: Any) -> str:
    """Short human readable name for a descriptor value."""
    if isinstance(value, str):
        return value
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    name = getattr(value, '__qualname__', None) or getattr(value, '__name__', None)
    return name or type(value).__name__


class PipeDescriptor:
    """Base for the classified descriptor variants."""

    def to_callable(self, factory: ClassFactory) -> Callable[..., Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class NamedFactory(PipeDescriptor):
    """A class or class name, constructed through the factory when resolved."""
    target: Any
    method: str = "handle"

    def to_callable(self, factory: ClassFactory) -> Callable[..., Any]:
        try:
            instance = factory.make(self.target)
        except Exception as e:
            raise InvalidPipeline(
                e,
                error_code=ErrorCode.PIPE_CONSTRUCTION_FAILED,
                context=ErrorContext(operation="make", pipe=describe(self.target))
            ) from e
        return getattr(instance, self.method)


@dataclass(frozen=True)
class CapabilityInstance(PipeDescriptor):
    """An object already exposing the capability method."""
    instance: Any
    method: str = "handle"

    def to_callable(self, factory: ClassFactory) -> Callable[..., Any]:
        return getattr(self.instance, self.method)


@dataclass(frozen=True)
class DirectCallable(PipeDescriptor):
    """A callable used as is."""
    func: Callable[..., Any]

    def to_callable(self, factory: ClassFactory) -> Callable[..., Any]:
        return self.func


def classify_pipe(pipe: Any, factory: Optional[ClassFactory] = None) -> PipeDescriptor:
    """
    Classify a pipe descriptor.

    Args:
        pipe: Class, class name, Pipe instance or callable
        factory: Factory used to check type identifiers

    Returns:
        The matching descriptor variant

    Raises:
        InvalidPipe: If the value matches none of the pipe shapes
    """
    factory = factory or get_default_factory()

    if isinstance(pipe, (str, type)) and factory.exists(pipe):
        return NamedFactory(pipe)
    if isinstance(pipe, Pipe):
        return CapabilityInstance(pipe)
    if is_invocable(pipe):
        return DirectCallable(pipe)

    raise InvalidPipe.from_pipe(pipe)
