"""
Installing a Scope as the default httpx transport.

Code under test often builds its own httpx.Client, leaving no way to pass a
transport in. A TransportPatch routes the default transports of every client
(httpx.HTTPTransport and httpx.AsyncHTTPTransport) to a Scope until
restore() is called:

    >>> patch = TransportPatch()
    >>> pynock.nock("http://example.com").get("/").reply(200, "OK").replace_default(patch)
    >>> httpx.get("http://example.com/").text
    'OK'
    >>> patch.restore()

The patch is a plain object held by the caller, so independent test runs
each keep their own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

import httpx

if TYPE_CHECKING:
    from .scope import Scope

logger = logging.getLogger(__name__)


class TransportPatch:
    """
    Save-once, restore-idempotent replacement of the default httpx transports.

    The first install() captures the transport methods active at that moment.
    Further installs only change which scope requests go to. restore() puts
    the captured methods back and is a no-op when nothing is installed.
    """

    def __init__(self) -> None:
        self._scope: Scope | None = None
        self._previous_sync: Callable[..., Any] | None = None
        self._previous_async: Callable[..., Any] | None = None

    @property
    def is_installed(self) -> bool:
        return self._previous_sync is not None

    @property
    def scope(self) -> Scope | None:
        return self._scope

    def install(self, scope: Scope) -> TransportPatch:
        """Route requests of default-transport clients to ``scope``."""
        self._scope = scope
        if self.is_installed:
            logger.debug(f"Default transport now routed to {scope}")
            return self

        previous_sync = self._previous_sync = httpx.HTTPTransport.handle_request
        previous_async = self._previous_async = httpx.AsyncHTTPTransport.handle_async_request

        patch = self

        # A patch restored out of order can stay reachable through a later
        # patch's capture; once restored it forwards to what it replaced.
        def handle_request(
            transport: httpx.HTTPTransport, request: httpx.Request
        ) -> httpx.Response:
            if patch._scope is None:
                return previous_sync(transport, request)
            return patch._scope.handle_request(request)

        async def handle_async_request(
            transport: httpx.AsyncHTTPTransport, request: httpx.Request
        ) -> httpx.Response:
            if patch._scope is None:
                return await previous_async(transport, request)
            return await patch._scope.handle_async_request(request)

        httpx.HTTPTransport.handle_request = handle_request  # type: ignore
        httpx.AsyncHTTPTransport.handle_async_request = handle_async_request  # type: ignore
        logger.debug(f"Installed {scope} as default transport")
        return self

    def restore(self) -> None:
        """Put back the transports captured by install(); safe to call repeatedly."""
        if not self.is_installed:
            return

        httpx.HTTPTransport.handle_request = self._previous_sync  # type: ignore
        httpx.AsyncHTTPTransport.handle_async_request = self._previous_async  # type: ignore
        self._previous_sync = None
        self._previous_async = None
        self._scope = None
        logger.debug("Restored default transport")

    def __enter__(self) -> TransportPatch:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.restore()
        return False
