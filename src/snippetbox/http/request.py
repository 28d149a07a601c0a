"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change. Middleware derives new
requests from it (``with_context``, ``with_path_params``) instead of
mutating it.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from snippetbox._internal.asgi import Receive, Scope
from snippetbox.context import RequestContext
from snippetbox.http.cookies import parse_cookies
from snippetbox.http.headers import Headers, ResponseHeaders

if TYPE_CHECKING:
    from snippetbox.http.forms import FormData


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()`` and ``.form()``.

    ``response_headers`` and ``_cache`` are the two mutable objects a
    request carries. Both are created once in ``from_asgi`` and shared by
    every request derived from it, so headers staged and bodies read by
    an outer stage are visible to inner ones.
    """

    method: str
    path: str
    headers: Headers
    query_string: bytes
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    cookies: Mapping[str, str]
    scheme: str = "http"
    context: RequestContext = field(default_factory=RequestContext)
    response_headers: ResponseHeaders = field(default_factory=ResponseHeaders, repr=False)

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False)

    # Private: mutable cache for body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def uri(self) -> str:
        """Request target: path plus query string."""
        qs = self.query_string
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    @property
    def remote_addr(self) -> str:
        """Client address as ``host:port`` (empty when unknown)."""
        if self.client is None:
            return ""
        host, port = self.client
        return f"{host}:{port}"

    @property
    def proto(self) -> str:
        """Protocol string such as ``HTTP/1.1``."""
        return f"HTTP/{self.http_version}"

    # -- Derivation --

    def with_context(self, **changes: Any) -> Request:
        """Return a new request whose context has *changes* applied."""
        return replace(self, context=replace(self.context, **changes))

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a new request carrying the router's captured parameters."""
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def form(self) -> FormData:
        """Parse the body as ``application/x-www-form-urlencoded`` data.

        Result is cached, so the CSRF stage and the terminal handler
        share one parse.

        Raises:
            BadRequest: If the body is not valid form data.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        from snippetbox.http.forms import parse_form_data

        raw = await self.body()
        result = parse_form_data(raw, self.content_type or "")
        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query_string=scope.get("query_string", b""),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "")),
            scheme=scope.get("scheme", "http"),
            _receive=receive,
        )
