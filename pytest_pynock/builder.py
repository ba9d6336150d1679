"""Fluent builder for creating httpx.Response objects in custom responders."""

from __future__ import annotations

import json
from typing import Any

import httpx


class ResponseBuilder:
    """
    Fluent builder for creating httpx.Response objects.

    Handy inside responders passed to Interceptor.respond(), where a reply
    depends on the request.

    Example:
        # Plain 200 OK
        response = ResponseBuilder().build()

        # Redirect
        response = ResponseBuilder().redirect("/login").build()

        # Custom response
        response = (
            ResponseBuilder()
            .with_status(201)
            .with_header("X-Request-Id", "abc")
            .with_json({"id": 1})
            .build()
        )
    """

    def __init__(self) -> None:
        self._status_code: int = 200
        self._headers: list[tuple[str, str]] = []
        self._content: bytes = b""

    def ok(self, body: str = "OK") -> ResponseBuilder:
        """Configure as 200 OK with a text body."""
        self._status_code = 200
        return self.with_text(body)

    def not_found(self) -> ResponseBuilder:
        """Configure as 404 Not Found."""
        self._status_code = 404
        return self.with_text("Not Found")

    def redirect(self, location: str, status: int = 302) -> ResponseBuilder:
        """Configure as a redirect with a Location header."""
        self._status_code = status
        self._headers.append(("Location", location))
        return self

    def error(self, code: int = 500, message: str = "Internal Server Error") -> ResponseBuilder:
        """Configure as server error."""
        self._status_code = code
        return self.with_text(message)

    def with_status(self, code: int) -> ResponseBuilder:
        self._status_code = code
        return self

    def with_header(self, key: str, value: str) -> ResponseBuilder:
        """Add a header; repeated keys keep every value in order."""
        self._headers.append((key, value))
        return self

    def with_headers(self, headers: dict[str, str]) -> ResponseBuilder:
        self._headers.extend(headers.items())
        return self

    def with_body(self, body: bytes) -> ResponseBuilder:
        self._content = body
        return self

    def with_text(self, text: str) -> ResponseBuilder:
        self._content = text.encode("utf-8")
        return self

    def with_json(self, payload: Any) -> ResponseBuilder:
        """Set a JSON body and Content-Type header."""
        self._content = json.dumps(payload).encode("utf-8")
        self._headers.append(("Content-Type", "application/json"))
        return self

    def build(self, request: httpx.Request | None = None) -> httpx.Response:
        """Build the httpx.Response, optionally bound to ``request``."""
        return httpx.Response(
            self._status_code,
            headers=list(self._headers),
            content=self._content,
            request=request,
        )
