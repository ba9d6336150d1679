"""
Per-test HTTP mocking helper behind the ``nock`` fixture.

NockFixture creates root scopes, remembers them for verification at the end
of the test and owns a TransportPatch so installed scopes never leak into the
next test.

Example:
    >>> def test_fetch_user(nock):
    ...     nock("https://api.example.com").get("/users/1").reply_json(200, {"id": 1})
    ...     with httpx.Client(transport=nock.transport) as client:
    ...         assert client.get("https://api.example.com/users/1").json() == {"id": 1}
"""

from __future__ import annotations

import logging

from pynock import Scope, TransportPatch, nock, nock_regexp

logger = logging.getLogger(__name__)


class NockFixture:
    """
    Factory for scopes that are verified when the test finishes.

    Attributes:
        verify: Whether teardown calls is_done() on every declared scope.
        patch: TransportPatch restored at teardown.
    """

    def __init__(self, *, verify: bool = True) -> None:
        self.verify = verify
        self.patch = TransportPatch()
        self._roots: list[Scope] = []

    def __call__(self, host: str) -> Scope:
        """Declare a new root scope for ``host``."""
        scope = nock(host)
        self._roots.append(scope)
        return scope

    def regexp(self, pattern: str) -> Scope:
        """Declare a new root scope for hosts matching ``pattern``."""
        scope = nock_regexp(pattern)
        self._roots.append(scope)
        return scope

    @property
    def scopes(self) -> list[Scope]:
        """Every scope declared through this fixture, chains flattened in order."""
        return [scope for root in self._roots for scope in root.chain()]

    @property
    def transport(self) -> Scope:
        """The most recently declared root scope, ready to pass as ``transport=``."""
        if not self._roots:
            raise LookupError("No scope declared yet; call nock(host) first")
        return self._roots[-1]

    def install(self, scope: Scope | None = None) -> Scope:
        """Install ``scope`` (default: the latest root) as the default httpx transport."""
        scope = scope if scope is not None else self.transport
        self.patch.install(scope)
        return scope

    def assert_all_done(self) -> None:
        """Call is_done() on every declared scope."""
        for scope in self.scopes:
            scope.is_done()

    def teardown(self) -> None:
        self.patch.restore()
        if self.verify:
            logger.debug(f"Verifying {len(self.scopes)} declared scopes")
            self.assert_all_done()
