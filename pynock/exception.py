from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    import httpx

    from .interceptor import Interceptor


class NockException(AssertionError):
    """Base exception for pynock errors."""

    pass


class NoMatchError(NockException):
    """Raised when no declared interceptor matches a dispatched request."""

    def __init__(
        self,
        message: str,
        request: httpx.Request,
        interceptors: Sequence[Interceptor] = (),
    ) -> None:
        super().__init__(message)
        self.request = request
        self.interceptors = list(interceptors)


class PartiallyDefinedError(NoMatchError):
    """Raised when the only interceptor targeting a request was never given a reply."""

    pass


class IncompleteExpectationsError(NockException):
    """Raised by Scope.is_done() when interceptors still have remaining uses."""

    def __init__(self, message: str, pending: Sequence[Interceptor] = ()) -> None:
        super().__init__(message)
        self.pending = list(pending)


class InvalidConfigurationError(NockException):
    """Raised when a scope or interceptor is declared with invalid arguments."""

    pass
