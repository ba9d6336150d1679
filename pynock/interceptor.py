"""
Interceptors: one expected request paired with a canned reply.

An interceptor is created by a Scope (``scope.get("/")``), optionally given a
use count with ``times()``, and armed with exactly one of ``reply()``,
``reply_json()``, ``reply_error()`` or ``respond()``. Each arming call returns
the owning Scope so declarations can be chained:

    >>> transport = (
    ...     pynock.nock("http://example.com")
    ...     .get("/")
    ...     .times(2)
    ...     .reply(200, "Hello")
    ...     .post("/form")
    ...     .reply_json(201, {"id": 1})
    ... )
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

import httpx

from .exception import InvalidConfigurationError

if TYPE_CHECKING:
    from .matcher import Matcher
    from .scope import Scope

logger = logging.getLogger(__name__)

Responder = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class Interceptor:
    """
    An expected request (method and path) with a reply and a use budget.

    Interceptors are never removed from their scope. Once ``remaining``
    reaches zero the interceptor is exhausted and no longer matches, but it
    stays listed for diagnostics and for Scope.is_done().

    Attributes:
        scope: The Scope that declared this interceptor.
        method: HTTP method compared case-sensitively with the request method.
        path_matcher: Matcher applied to the request path (no query string).
        remaining: Number of requests this interceptor may still serve.
        responder: Callable producing the reply, or None while the
            interceptor is partially defined.
    """

    def __init__(self, scope: Scope, method: str, path_matcher: Matcher) -> None:
        self.scope = scope
        self.method = method
        self.path_matcher = path_matcher
        self.remaining: int = 1
        self.responder: Responder | None = None

    # === Configuration API ===

    def times(self, times: int) -> Interceptor:
        """Allow this interceptor to serve ``times`` requests instead of one."""
        if times < 1:
            raise InvalidConfigurationError(
                f"times() expects a positive number of uses, got {times} for {self.describe()}"
            )
        self.remaining = times
        return self

    def reply(self, status: int, body: str | bytes = "") -> Scope:
        """
        Reply with a fixed status code and body.

        No Content-Type header is set; the scope's default reply headers can
        provide one.
        """
        content = body.encode("utf-8") if isinstance(body, str) else body

        def responder(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, content=content, request=request)

        return self.respond(responder)

    def reply_json(self, status: int, payload: Any) -> Scope:
        """
        Reply with a fixed status code and a JSON body.

        A string payload is sent verbatim. Anything else is serialized with
        json.dumps() right away, so an unserializable payload fails the test
        where it is declared.

        Raises:
            InvalidConfigurationError: If the payload cannot be serialized.
        """
        content = _json_to_text(payload).encode("utf-8")

        def responder(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status,
                content=content,
                headers={"Content-Type": "application/json"},
                request=request,
            )

        return self.respond(responder)

    def reply_error(self, error: Exception) -> Scope:
        """
        Raise ``error`` instead of replying, the way a failing transport does.

        Use an httpx.TransportError subclass to simulate network failures:

            >>> pynock.nock("http://example.com").get("/").reply_error(
            ...     httpx.ConnectError("Connection refused")
            ... )
        """

        def responder(request: httpx.Request) -> httpx.Response:
            raise error.with_traceback(None)

        return self.respond(responder)

    def respond(self, responder: Responder) -> Scope:
        """
        Reply using an arbitrary callable.

        The callable receives the httpx.Request and returns an httpx.Response,
        or raises to simulate a transport error. Coroutine functions are
        awaited when the scope is used as an async transport.
        """
        self.responder = responder
        logger.debug(f"Armed interceptor {self.describe()}")
        return self.scope

    # === State ===

    @property
    def is_partially_defined(self) -> bool:
        """True if no reply has been attached yet."""
        return self.responder is None

    @property
    def is_exhausted(self) -> bool:
        return self.remaining < 1

    # === Matching ===

    def targets(self, request: httpx.Request) -> bool:
        """Check use count, host, method and path, ignoring whether a reply is attached."""
        if self.is_exhausted:
            return False
        if not self.scope.intercepts(request):
            return False
        if request.method != self.method:
            return False
        return self.path_matcher.matches(request.url.path)

    def matches(self, request: httpx.Request) -> bool:
        """Check whether this interceptor can serve ``request``."""
        if self.is_partially_defined:
            return False
        return self.targets(request)

    # === Serving ===

    def serve(self, request: httpx.Request) -> httpx.Response:
        """
        Consume one use and produce the reply.

        The use is consumed before the responder runs, so a responder that
        raises still counts as served. Exceptions from the responder are
        propagated unchanged. Coroutine responders are rejected before any
        use is consumed.
        """
        if inspect.iscoroutinefunction(self.responder):
            raise TypeError(
                f"Responder for {self.describe()} is a coroutine function; "
                f"use httpx.AsyncClient to dispatch to async responders"
            )
        responder = self._consume()
        response = responder(request)
        if inspect.isawaitable(response):
            if inspect.iscoroutine(response):
                response.close()
            raise TypeError(
                f"Responder for {self.describe()} returned an awaitable; "
                f"use httpx.AsyncClient to dispatch to async responders"
            )
        return self._apply_default_headers(response)

    async def serve_async(self, request: httpx.Request) -> httpx.Response:
        """Async version of serve(), awaiting the responder if needed."""
        responder = self._consume()
        response = responder(request)
        if inspect.isawaitable(response):
            response = await response
        return self._apply_default_headers(response)

    def _consume(self) -> Responder:
        if self.responder is None:
            raise RuntimeError(f"Interceptor {self.describe()} has no reply to serve")
        self.remaining -= 1
        logger.debug(f"Serving {self.describe()} ({self.remaining} uses left)")
        return self.responder

    def _apply_default_headers(self, response: httpx.Response) -> httpx.Response:
        defaults = self.scope.default_headers
        missing = [
            (name, value)
            for name, values in defaults.items()
            if name not in response.headers
            for value in values
        ]
        if missing:
            response.headers = httpx.Headers([*response.headers.multi_items(), *missing])
        return response

    # === Description ===

    def describe(self) -> str:
        description = f"{self.method} {self.scope}{self.path_matcher}"
        if self.is_partially_defined:
            description += " (partially defined)"
        return description

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Interceptor({self.describe()}, remaining={self.remaining})"


def _json_to_text(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    try:
        return json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Cannot encode reply payload as JSON: {e}") from e
