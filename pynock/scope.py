"""
Scopes: declared hosts owning ordered interceptors.

A Scope is an httpx transport. Pass the scope returned by a declaration
chain as ``transport=`` to httpx.Client or httpx.AsyncClient and every request
the client sends is served by the declared interceptors:

    >>> transport = pynock.nock("http://example.com").get("/").reply(200, "Hello")
    >>> with httpx.Client(transport=transport) as client:
    ...     client.get("http://example.com/").text
    'Hello'

Scopes declared with nock() on another scope form a chain. Whichever scope
of a chain receives a request, dispatch starts at the root and tries each
scope's interceptors in declaration order before moving on to the next scope.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Sequence

import httpx

from ._diagnostics import no_match_message, scheme_and_host
from .exception import IncompleteExpectationsError, NoMatchError, PartiallyDefinedError
from .interceptor import Interceptor
from .matcher import ExactMatcher, Matcher, RegexpMatcher, host_matcher

if TYPE_CHECKING:
    from .patch import TransportPatch

logger = logging.getLogger(__name__)


class Scope(httpx.BaseTransport, httpx.AsyncBaseTransport):
    """
    A host (or host pattern) with an ordered list of interceptors.

    Scopes are normally created with pynock.nock() / pynock.nock_regexp() or,
    for further hosts, with Scope.nock() / Scope.nock_regexp().

    Attributes:
        host_matcher: Matcher applied to "scheme://host[:port]" of each request.
        parent: The scope this one was declared from, None for the root.
        child: The next scope of the chain, if any.
        interceptors: Interceptors in declaration (and priority) order.
        default_headers: Header values added to replies lacking those headers.
    """

    def __init__(self, host_matcher: Matcher, parent: Scope | None = None) -> None:
        self.host_matcher = host_matcher
        self.parent = parent
        self.child: Scope | None = None
        self.interceptors: list[Interceptor] = []
        self.default_headers: dict[str, list[str]] = {}

    # === Chain ===

    @property
    def root(self) -> Scope:
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    def chain(self) -> Iterator[Scope]:
        """Iterate over every scope of this chain, starting at the root."""
        scope: Scope | None = self.root
        while scope is not None:
            yield scope
            scope = scope.child

    def nock(self, host: str) -> Scope:
        """Declare another host on this chain and return its scope."""
        return self._add_scope(host_matcher(host))

    def nock_regexp(self, pattern: str) -> Scope:
        """Declare another host pattern on this chain and return its scope."""
        return self._add_scope(RegexpMatcher(pattern))

    def _add_scope(self, matcher: Matcher) -> Scope:
        # A scope holds one child; later declarations go to the end of the chain.
        tail = self
        while tail.child is not None:
            tail = tail.child
        tail.child = Scope(matcher, parent=tail)
        logger.debug(f"Declared scope {tail.child}")
        return tail.child

    # === Declarations ===

    def default_reply_headers(self, headers: Mapping[str, str | Sequence[str]]) -> Scope:
        """
        Set headers added to every reply of this scope's interceptors.

        A header is only added when the reply does not already carry it, so
        responders can override any default.

        Args:
            headers: Header name to a value or an ordered sequence of values.
        """
        self.default_headers = {
            name: [values] if isinstance(values, str) else list(values)
            for name, values in headers.items()
        }
        return self

    def intercept(self, method: str, path: str) -> Interceptor:
        """Expect a request with ``method`` for exactly ``path``."""
        return self._add_interceptor(method, ExactMatcher(path))

    def interceptf(self, method: str, path_template: str, *args: Any) -> Interceptor:
        """Expect a request for ``path_template % args``."""
        return self._add_interceptor(method, ExactMatcher(path_template % args))

    def intercept_regexp(self, method: str, pattern: str) -> Interceptor:
        """Expect a request whose path contains a match for ``pattern``."""
        return self._add_interceptor(method, RegexpMatcher(pattern))

    def _add_interceptor(self, method: str, path_matcher: Matcher) -> Interceptor:
        interceptor = Interceptor(self, method, path_matcher)
        self.interceptors.append(interceptor)
        logger.debug(f"Declared interceptor {interceptor}")
        return interceptor

    def get(self, path: str) -> Interceptor:
        return self.intercept("GET", path)

    def post(self, path: str) -> Interceptor:
        return self.intercept("POST", path)

    def put(self, path: str) -> Interceptor:
        return self.intercept("PUT", path)

    def patch(self, path: str) -> Interceptor:
        return self.intercept("PATCH", path)

    def head(self, path: str) -> Interceptor:
        return self.intercept("HEAD", path)

    def options(self, path: str) -> Interceptor:
        return self.intercept("OPTIONS", path)

    def delete(self, path: str) -> Interceptor:
        return self.intercept("DELETE", path)

    def getf(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("GET", path_template, *args)

    def postf(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("POST", path_template, *args)

    def putf(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("PUT", path_template, *args)

    def patchf(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("PATCH", path_template, *args)

    def deletef(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("DELETE", path_template, *args)

    def headf(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("HEAD", path_template, *args)

    def optionsf(self, path_template: str, *args: Any) -> Interceptor:
        return self.interceptf("OPTIONS", path_template, *args)

    def get_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("GET", pattern)

    def post_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("POST", pattern)

    def put_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("PUT", pattern)

    def patch_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("PATCH", pattern)

    def delete_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("DELETE", pattern)

    def head_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("HEAD", pattern)

    def options_regexp(self, pattern: str) -> Interceptor:
        return self.intercept_regexp("OPTIONS", pattern)

    # === Dispatch ===

    def intercepts(self, request: httpx.Request) -> bool:
        """Check whether the request's scheme and host belong to this scope."""
        return self.host_matcher.matches(scheme_and_host(request))

    def select(self, request: httpx.Request) -> Interceptor:
        """
        Find the interceptor that serves ``request``.

        Walks the whole chain from the root, each scope's interceptors in
        declaration order, and returns the first one that matches. Nothing is
        consumed.

        Raises:
            PartiallyDefinedError: If the only interceptors targeting the
                request have no reply attached.
            NoMatchError: If no interceptor in the chain targets the request.
        """
        for scope in self.chain():
            for interceptor in scope.interceptors:
                if interceptor.matches(request):
                    return interceptor

        inventory = [i for scope in self.chain() for i in scope.interceptors]
        if any(i.is_partially_defined and i.targets(request) for i in inventory):
            raise PartiallyDefinedError(
                no_match_message(request, inventory, partially_defined=True),
                request,
                inventory,
            )
        raise NoMatchError(no_match_message(request, inventory), request, inventory)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self.select(request).serve(request)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.select(request).serve_async(request)

    # === Verification ===

    def pending(self) -> list[Interceptor]:
        """Return this scope's interceptors that still have remaining uses."""
        return [i for i in self.interceptors if not i.is_exhausted]

    def is_done(self) -> None:
        """
        Assert that every interceptor of this scope has been used up.

        Only this scope's own interceptors are checked, not those of other
        scopes in the chain.

        Raises:
            IncompleteExpectationsError: If any interceptor has remaining uses.
        """
        pending = self.pending()
        if pending:
            listing = "\n".join(f"{i.describe()} ({i.remaining} uses left)" for i in pending)
            raise IncompleteExpectationsError(
                f"Not all interceptors have been used! Pending:\n{listing}",
                pending,
            )

    # === Default transport ===

    def replace_default(self, patch: TransportPatch) -> Scope:
        """Install this scope as the default httpx transport through ``patch``."""
        patch.install(self)
        return self

    def __str__(self) -> str:
        return str(self.host_matcher)

    def __repr__(self) -> str:
        return f"Scope({self.host_matcher!r}, interceptors={len(self.interceptors)})"
