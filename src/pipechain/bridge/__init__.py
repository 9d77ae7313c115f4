"""
Middleware Bridge

Lets HTTP middleware and generic pipes share one pipeline.
"""

from pipechain.bridge.adapters import CallableMiddleware, PipeResponseHandler, TransformingPipe
from pipechain.bridge.bridge import (
    MIDDLEWARE_RESPONSE,
    PipelineBridge,
    get_bridge,
    set_bridge,
    reset_bridge,
    to_pipe,
    to_middleware,
    middleware_to_pipe,
    make,
    set_app,
    set_middleware_adapter,
    reset_middleware_adapter,
)
from pipechain.bridge.interfaces import Container, Middleware, RequestHandler, ServerRequest

__all__ = [
    'MIDDLEWARE_RESPONSE',
    'PipelineBridge',
    'CallableMiddleware',
    'PipeResponseHandler',
    'TransformingPipe',
    'Container',
    'Middleware',
    'RequestHandler',
    'ServerRequest',
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
