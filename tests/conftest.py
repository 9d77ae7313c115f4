"""
Shared fixtures for the Pipechain test suite.

The bridge, its factory container and the error reporter are process-wide;
every test starts and ends with a fresh copy of each.
"""

import pytest

from pipechain.bridge import reset_bridge, get_bridge
from pipechain.core.error_context import get_error_reporter

from stubs import MiddlewareInterface, MiddlewareAdapter, Request, Response


@pytest.fixture(autouse=True)
def fresh_bridge():
    """Reset process-wide bridge state around each test."""
    bridge = reset_bridge()
    get_error_reporter().clear_report_handlers()
    yield bridge
    reset_bridge()
    get_error_reporter().clear_report_handlers()


@pytest.fixture
def host_adapter():
    """Register the host framework's middleware interface and adapter."""
    bridge = get_bridge()
    bridge.set_middleware_adapter(MiddlewareInterface, MiddlewareAdapter)
    yield bridge
    bridge.reset_middleware_adapter()


@pytest.fixture
def reports():
    """Collect reports sent to the error reporter."""
    collected = []
    get_error_reporter().register_report_handler(collected.append)
    return collected


@pytest.fixture
def request_stub():
    return Request()


@pytest.fixture
def response_stub():
    return Response(100)
