import logging
import re
from typing import Union

from .exception import (
    IncompleteExpectationsError,
    InvalidConfigurationError,
    NockException,
    NoMatchError,
    PartiallyDefinedError,
)
from .interceptor import Interceptor, Responder
from .matcher import ExactMatcher, Matcher, RegexpMatcher, host_matcher
from .patch import TransportPatch
from .scope import Scope

# Set up logging with NullHandler to avoid "No handler found" warnings
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "nock",
    "nock_regexp",
    "Scope",
    "Interceptor",
    "Responder",
    "TransportPatch",
    "Matcher",
    "ExactMatcher",
    "RegexpMatcher",
    "NockException",
    "NoMatchError",
    "PartiallyDefinedError",
    "IncompleteExpectationsError",
    "InvalidConfigurationError",
]


def nock(host: str) -> Scope:
    """
    Start declaring expected requests for ``host``.

    Args:
        host: Scheme and host (and optional port) to intercept, e.g.
            "http://example.com". Paths and query strings are rejected.

    Returns:
        The root Scope of a new chain.
    """
    return Scope(host_matcher(host))


def nock_regexp(pattern: Union[str, "re.Pattern[str]"]) -> Scope:
    """
    Start declaring expected requests for every host matching ``pattern``.

    The pattern is searched in "scheme://host[:port]" of each request; use
    ".*" to match any host.
    """
    return Scope(RegexpMatcher(pattern))
