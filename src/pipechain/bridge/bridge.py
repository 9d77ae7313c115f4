"""
Pipeline Bridge

Adapts the generic pipeline to the HTTP request/response middleware
convention so that pipes and middleware can be freely intermixed. Middleware
may be given as a callable ``(request, handler)``, a middleware class (or class
name), or an instance of the middleware interface.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Union

from pipechain.bridge.adapters import CallableMiddleware, PipeResponseHandler, TransformingPipe
from pipechain.core.config.models import BridgeSettings, MIDDLEWARE_RESPONSE
from pipechain.core.exceptions import (
    InvalidMiddlewareForPipe, InvalidPipeline, MiddlewareInterfaceNotFound, ErrorContext
)
from pipechain.core.factory import ClassFactory, get_default_factory
from pipechain.core.pipeline.descriptors import describe, is_invocable
from pipechain.core.pipeline.executor import Pipeline
from pipechain.core.pipeline.interfaces import Pipe


logger = logging.getLogger("pipechain.bridge")

TypeName = Union[str, type]


class PipelineBridge:
    """
    Converts between pipes and middleware.

    The bridge holds the middleware adapter registration (interface and
    adapter class supplied by a host framework) and the factory used to build
    pipes and middleware by class name.
    """

    def __init__(self, settings: Optional[BridgeSettings] = None,
                 factory: Optional[ClassFactory] = None,
                 container: Optional[Any] = None):
        """
        Initialize the bridge.

        Args:
            settings: Bridge settings, defaults to BridgeSettings()
            factory: Factory for class names; a new one is created if omitted
            container: Dependency container to set on the factory
        """
        self.settings = settings or BridgeSettings()
        self.factory = factory or ClassFactory()
        if container is not None:
            self.factory.set_container(container)

        self._middleware_interface: Optional[TypeName] = self.settings.middleware_interface
        self._middleware_class: Optional[TypeName] = self.settings.middleware_adapter

    @classmethod
    def from_settings(cls, settings: BridgeSettings, container: Optional[Any] = None) -> 'PipelineBridge':
        """Build a bridge with its own factory from settings."""
        return cls(settings=settings, factory=ClassFactory(container))

    @property
    def response_attribute(self) -> str:
        """Request attribute under which the in-flight pipe response is attached."""
        return self.settings.response_attribute

    def to_pipe(self, pipe: Any) -> Pipe:
        """
        Wrap any pipe shape in a pipe that passes its result to ``next``.

        Raises:
            InvalidPipe: When the pipe is none of the supported shapes
            InvalidPipeline: When resolving the pipe fails
        """
        return TransformingPipe(Pipeline.resolve(pipe, self.factory))

    def to_middleware(self, middleware: Any) -> Any:
        """
        Normalize a middleware into an object implementing the middleware interface.

        Raises:
            MiddlewareInterfaceNotFound: When no middleware interface can be loaded
            InvalidMiddlewareForPipe: When the middleware is none of the supported shapes
            InvalidPipeline: When an unexpected failure occurs for a non-string middleware
        """
        interface = self.get_middleware_interface()

        try:
            process = None
            if is_invocable(middleware):
                process = middleware
            elif isinstance(middleware, (str, type)) and self.factory.exists(middleware):
                process = self.make(middleware).process
            elif isinstance(middleware, interface):
                process = middleware.process

            if process is not None:
                return self.get_middleware_adapter(process)

            raise InvalidMiddlewareForPipe(
                'Invalid middleware type. Middleware must be a callable, an instance of'
                ' "{0}" or a class name of a concrete that implements "{0}".'.format(describe(interface)),
                middleware=middleware
            )
        except InvalidMiddlewareForPipe:
            raise
        except Exception as e:
            context = ErrorContext(operation="to_middleware", pipe=describe(middleware))
            if not isinstance(middleware, str):
                raise InvalidPipeline(e, context=context) from e

            raise InvalidMiddlewareForPipe(
                f'The given middleware classname: "{middleware}" must be an instance of '
                f'"{describe(interface)}".',
                middleware=middleware,
                context=context,
                cause=e
            ) from e

    def middleware_to_pipe(self, middleware: Any) -> Pipe:
        """
        Bridge a middleware into the pipe chain.

        The resulting pipe expects the subject to be the response so far and
        the request as the first extra argument. The response is attached to
        the request under ``response_attribute`` and the middleware is processed
        once; its response is passed on to ``next``. The middleware is only
        normalized when the pipe handles the subject.
        """
        def process(response: Any, next: Callable[[Any], Any], request: Any, *use: Any) -> Any:
            normalized = self.to_middleware(middleware)
            request = request.with_attribute(self.response_attribute, response)
            return normalized.process(request, self.get_pipe_handler(response, use))

        return self.to_pipe(process)

    def get_pipe_handler(self, response: Any, args: Sequence[Any]) -> Any:
        """
        Get the request handler returning the pipe response.

        Args:
            response: The pipe response
            args: Remaining extra arguments; a leading handler class (or class
                name) is instantiated with the response

        Returns:
            Request handler
        """
        handler = args[0] if args else None
        if isinstance(handler, (str, type)):
            handler_class = self.factory.locate(handler)
            if handler_class is not None:
                return handler_class(response)
        return PipeResponseHandler(response)

    def make(self, class_name: TypeName) -> Any:
        """Build an instance, preferring the container entry for the name."""
        return self.factory.make(class_name)

    def set_app(self, container: Optional[Any]) -> None:
        """Set the dependency container used by ``make``."""
        self.factory.set_container(container)

    def set_middleware_adapter(self, interface: Optional[TypeName], class_name: Optional[TypeName]) -> None:
        """Register the host framework's middleware interface and adapter class."""
        self._middleware_interface = interface or None
        self._middleware_class = class_name or None
        logger.debug(f"Middleware adapter set: {interface!r} -> {class_name!r}")

    def reset_middleware_adapter(self) -> None:
        """Forget the registered middleware interface and adapter class."""
        self._middleware_interface = None
        self._middleware_class = None

    def has_middleware_interface_adapter(self) -> bool:
        return bool(self._middleware_interface) and self.factory.locate(self._middleware_interface) is not None

    def has_middleware_class_adapter(self) -> bool:
        return bool(self._middleware_class) and self.factory.locate(self._middleware_class) is not None

    def get_middleware_interface(self) -> type:
        """
        Get the middleware interface in use.

        Raises:
            MiddlewareInterfaceNotFound: When neither the registered nor the
                default interface can be loaded
        """
        if self.has_middleware_interface_adapter():
            return self.factory.locate(self._middleware_interface)

        default = self.settings.default_middleware_interface
        interface = self.factory.locate(default)
        if interface is None:
            raise MiddlewareInterfaceNotFound(
                'Cannot find HTTP Server Middleware interface.', interface=default
            )
        return interface

    def get_middleware_adapter(self, middleware: Callable[[Any, Any], Any]) -> Any:
        """Wrap a normalized middleware callable in the registered or default adapter."""
        if self.has_middleware_class_adapter():
            return self.factory.locate(self._middleware_class)(middleware)
        return CallableMiddleware(middleware)

    def __repr__(self) -> str:
        return (f"PipelineBridge(interface={self._middleware_interface!r}, "
                f"adapter={self._middleware_class!r})")


def _new_default_bridge() -> PipelineBridge:
    return PipelineBridge(factory=get_default_factory())


# Global instance
_default_bridge = _new_default_bridge()


def get_bridge() -> PipelineBridge:
    """Get the process-wide bridge."""
    return _default_bridge


def set_bridge(bridge: PipelineBridge) -> None:
    """Replace the process-wide bridge."""
    global _default_bridge
    _default_bridge = bridge


def reset_bridge() -> PipelineBridge:
    """Restore a fresh process-wide bridge and clear the default container."""
    get_default_factory().set_container(None)
    set_bridge(_new_default_bridge())
    return _default_bridge


def to_pipe(pipe: Any) -> Pipe:
    """Wrap any pipe shape using the process-wide bridge."""
    return _default_bridge.to_pipe(pipe)


def to_middleware(middleware: Any) -> Any:
    """Normalize a middleware using the process-wide bridge."""
    return _default_bridge.to_middleware(middleware)


def middleware_to_pipe(middleware: Any) -> Pipe:
    """Bridge a middleware into a pipe using the process-wide bridge."""
    return _default_bridge.middleware_to_pipe(middleware)


def make(class_name: TypeName) -> Any:
    """Build an instance using the process-wide bridge."""
    return _default_bridge.make(class_name)


def set_app(container: Optional[Any]) -> None:
    """Set the container on the process-wide bridge."""
    _default_bridge.set_app(container)


def set_middleware_adapter(interface: Optional[TypeName], class_name: Optional[TypeName]) -> None:
    """Register the middleware adapter on the process-wide bridge."""
    _default_bridge.set_middleware_adapter(interface, class_name)


def reset_middleware_adapter() -> None:
    """Forget the middleware adapter on the process-wide bridge."""
    _default_bridge.reset_middleware_adapter()


__all__ = [
    'MIDDLEWARE_RESPONSE',
    'PipelineBridge',
    'get_bridge',
    'set_bridge',
    'reset_bridge',
    'to_pipe',
    'to_middleware',
    'middleware_to_pipe',
    'make',
    'set_app',
    'set_middleware_adapter',
    'reset_middleware_adapter',
]
