"""
Pytest plugin for testing code that talks HTTP through httpx.

This plugin provides fixtures for declaring expected requests with pynock
and verifying them when the test finishes.

Fixtures:
    - `nock` - NockFixture creating scopes, verified at teardown
    - `nock_transport_patch` - TransportPatch restored at teardown
    - `response_builder` - ResponseBuilder for custom responders

Markers:
    @pytest.mark.nock(verify=True)
        Configure the `nock` fixture. With verify=False, unused
        interceptors do not fail the test.

Example - Transport passed explicitly:
    >>> def test_fetch(nock):
    ...     transport = nock("http://example.com").get("/").reply(200, "Hello")
    ...     with httpx.Client(transport=transport) as client:
    ...         assert client.get("http://example.com/").text == "Hello"

Example - Code that builds its own client:
    >>> def test_service(nock):
    ...     nock("http://example.com").get("/health").reply(200, "OK")
    ...     nock.install()
    ...     assert httpx.get("http://example.com/health").status_code == 200

Example - Skipping verification:
    >>> @pytest.mark.nock(verify=False)
    ... def test_optional_calls(nock):
    ...     nock("http://example.com").get("/maybe").reply(200, "")

See Also:
    - pynock.Scope: Declarations, dispatch and is_done()
    - ResponseBuilder: Fluent builder for httpx responses
"""

from __future__ import annotations

from typing import Any, Generator

import pytest

from pynock import TransportPatch

from .builder import ResponseBuilder
from .fixture import NockFixture

__all__ = [
    # Plugin hooks
    "pytest_configure",
    # Fixtures
    "nock",
    "nock_transport_patch",
    "response_builder",
    # Helpers
    "NockFixture",
    "ResponseBuilder",
]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "nock(verify): configure the nock fixture; verify=False skips the "
        "unused-interceptor check at teardown",
    )


@pytest.fixture
def nock(request) -> Generator[NockFixture, None, None]:
    """
    Declare expected HTTP requests for the current test.

    At teardown the default transport is restored and, unless disabled with
    @pytest.mark.nock(verify=False), every declared scope must have used all
    of its interceptors.

    Supported marker kwargs:
        - verify: check unused interceptors at teardown (default: True)
    """
    marker = request.node.get_closest_marker("nock")

    # Default configuration
    config: dict[str, Any] = {
        "verify": True,
    }

    # Override with marker kwargs if provided
    if marker and marker.kwargs:
        config.update(marker.kwargs)

    fixture = NockFixture(verify=config["verify"])
    yield fixture
    fixture.teardown()


@pytest.fixture
def nock_transport_patch() -> Generator[TransportPatch, None, None]:
    """TransportPatch that is restored when the test finishes."""
    with TransportPatch() as patch:
        yield patch


@pytest.fixture
def response_builder() -> ResponseBuilder:
    """Factory for building custom httpx.Response objects."""
    return ResponseBuilder()
