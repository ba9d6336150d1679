"""Failure messages for requests that no interceptor matched."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    import httpx

    from .interceptor import Interceptor

# Methods with a Scope shorthand; anything else is suggested through intercept().
SHORTHAND_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "HEAD", "OPTIONS", "DELETE"})


def scheme_and_host(request: httpx.Request) -> str:
    """Return "scheme://host[:port]" for the request URL."""
    url = request.url
    return f"{url.scheme}://{url.netloc.decode('ascii')}"


def describe_request(request: httpx.Request) -> str:
    return f"{request.method} {request.url}"


def describe_interceptors(interceptors: Iterable[Interceptor]) -> str:
    lines = [interceptor.describe() for interceptor in interceptors]
    if not lines:
        return "none"
    return "\n".join(lines)


def describe_usage(request: httpx.Request) -> str:
    """Suggest the declaration that would have matched ``request``."""
    path = request.url.path
    if request.method in SHORTHAND_METHODS:
        call = f'{request.method.lower()}("{path}")'
    else:
        call = f'intercept("{request.method}", "{path}")'

    return (
        "Did you forget to add the interceptor?\n"
        f'pynock.nock("{scheme_and_host(request)}").\n'
        f"    {call}.\n"
        '    reply(200, "OK")'
    )


def no_match_message(
    request: httpx.Request,
    interceptors: Iterable[Interceptor],
    *,
    partially_defined: bool = False,
) -> str:
    if partially_defined:
        headline = (
            f"pynock found a partially defined interceptor for request: "
            f"{describe_request(request)}\n"
            f"Attach a reply with reply(), reply_json(), reply_error() or respond()."
        )
    else:
        headline = f"pynock found no match for request: {describe_request(request)}"

    return (
        f"{headline}\n\n"
        f"Registered interceptors:\n{describe_interceptors(interceptors)}\n\n"
        f"{describe_usage(request)}"
    )
