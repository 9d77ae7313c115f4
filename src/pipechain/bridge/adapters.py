"""
Bridge Adapters

Small named adapter types used by the bridge: a pipe that feeds the result of
a wrapped pipe into the continuation, the default middleware wrapping a
normalized callable, and the request handler returning the pipe response.
"""

from typing import Any, Callable

from pipechain.core.pipeline.interfaces import Pipe, NextPipe


class TransformingPipe(Pipe):
    """
    Pipe whose result is passed on to ``next``.

    Suitable for wrapped steps that return a transformation of the subject
    instead of invoking the continuation themselves.
    """

    def __init__(self, pipe: Callable[..., Any]):
        self.pipe = pipe

    def handle(self, subject: Any, next: NextPipe, *use: Any) -> Any:
        return next(self.pipe(subject, next, *use))

    def __repr__(self) -> str:
        return f"TransformingPipe({self.pipe!r})"


class CallableMiddleware:
    """Default middleware forwarding ``process`` to the wrapped callable."""

    def __init__(self, middleware: Callable[[Any, Any], Any]):
        self.middleware = middleware

    def process(self, request: Any, handler: Any) -> Any:
        return self.middleware(request, handler)

    def __repr__(self) -> str:
        return f"CallableMiddleware({self.middleware!r})"


class PipeResponseHandler:
    """Request handler that returns the response hydrated by the pipe."""

    def __init__(self, response: Any):
        self.response = response

    def handle(self, request: Any) -> Any:
        return self.response
