"""
HTTP Middleware Interfaces

Structural contracts for the request/response collaborators the bridge works
with. Host frameworks supply the concrete types; any object with the listed
methods satisfies the protocol.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ServerRequest(Protocol):
    """Immutable server request carrying named attributes."""

    def with_attribute(self, name: str, value: Any) -> 'ServerRequest':
        """Return a copy of the request with the attribute set."""

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the attribute value or ``default``."""


@runtime_checkable
class RequestHandler(Protocol):
    """Handles a server request and produces a response."""

    def handle(self, request: ServerRequest) -> Any:
        """Return the response for the request."""


@runtime_checkable
class Middleware(Protocol):
    """Processes a request, optionally delegating to the handler."""

    def process(self, request: ServerRequest, handler: RequestHandler) -> Any:
        """Return the response for the request."""


@runtime_checkable
class Container(Protocol):
    """Dependency container consulted before constructing classes by name."""

    def has(self, name: Any) -> bool:
        """Whether an entry exists for ``name``."""

    def get(self, name: Any) -> Any:
        """Return the entry for ``name``."""
