"""
Exact and regular-expression string matchers.

Scopes match the scheme and host of a request and interceptors match its
path. Both use one of the two matchers below, so neither needs to know
which kind it was declared with.
"""

from __future__ import annotations

import re
from typing import Protocol
from urllib.parse import urlsplit

import httpx

from .exception import InvalidConfigurationError


class Matcher(Protocol):
    """Protocol implemented by ExactMatcher and RegexpMatcher."""

    def matches(self, candidate: str) -> bool: ...

    def __str__(self) -> str: ...


class ExactMatcher:
    """Matches a candidate equal to the declared value."""

    def __init__(self, value: str) -> None:
        self.value = value

    def matches(self, candidate: str) -> bool:
        return candidate == self.value

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"ExactMatcher({self.value!r})"


class RegexpMatcher:
    """
    Matches a candidate containing a match for the declared pattern.

    The pattern is searched, not anchored: "/(fu)?bar" matches "/fubar" and
    "/api/bar/1". Use ^ and $ to require a full match.
    """

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        if isinstance(pattern, re.Pattern):
            self.pattern = pattern
        else:
            try:
                self.pattern = re.compile(pattern)
            except re.error as e:
                raise InvalidConfigurationError(
                    f"Invalid regular expression {pattern!r}: {e}"
                ) from e

    def matches(self, candidate: str) -> bool:
        return self.pattern.search(candidate) is not None

    def __str__(self) -> str:
        return self.pattern.pattern

    def __repr__(self) -> str:
        return f"RegexpMatcher({self.pattern.pattern!r})"


def host_matcher(host: str) -> ExactMatcher:
    """
    Build an exact matcher for a declared "scheme://host[:port]" string.

    The host is canonicalised the way httpx normalises request URLs: the
    scheme and hostname are lowercased, a default port (80 for http, 443
    for https) is dropped and userinfo is ignored. "http://Example.com:80"
    therefore matches requests to "http://example.com/".

    Args:
        host: The host to intercept, e.g. "http://example.com".

    Returns:
        An ExactMatcher for the canonical scheme and host.

    Raises:
        InvalidConfigurationError: If the host lacks a scheme or network
            location, carries a path, query string or fragment, or is not
            a valid URL. Such a host could never equal the scheme and host
            of a request.
    """
    parts = urlsplit(host)
    if not parts.scheme or not parts.netloc:
        raise InvalidConfigurationError(
            f"Invalid host {host!r}: expected scheme and host, e.g. 'http://example.com'"
        )
    if parts.path or parts.query or parts.fragment:
        raise InvalidConfigurationError(
            f"Invalid host {host!r}: a host must not contain a path, query or fragment. "
            f"Declare the path on the interceptor instead."
        )
    try:
        url = httpx.URL(host)
    except httpx.InvalidURL as e:
        raise InvalidConfigurationError(f"Invalid host {host!r}: {e}") from e
    return ExactMatcher(f"{url.scheme}://{url.netloc.decode('ascii')}")
