"""Async test client for snippetbox.

Uses the same Request and Response types as production.
No wrapper translation layer.
"""

from __future__ import annotations

import re
from typing import Any, TypeAlias
from urllib.parse import quote, urlencode

from snippetbox._internal.asgi import Receive, Scope, Send
from snippetbox.http.cookies import parse_cookies
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Handler
from snippetbox.server.handler import handle_request

ASGIApp: TypeAlias = Any

_CSRF_INPUT = re.compile(r'<input type="hidden" name="csrf_token" value="([^"]*)">')


def asgi_app(handler: Handler) -> ASGIApp:
    """Expose a built handler (a chain, a router) as a bare ASGI app.

    Lets tests drive one stage or one chain through the real server
    glue without building a whole ``App``.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        await handle_request(scope, receive, send, handler=handler)

    return app


def extract_csrf_token(body: str) -> str:
    """Return the CSRF token embedded in a rendered form.

    Raises ``LookupError`` if the page has no token field.
    """
    match = _CSRF_INPUT.search(body)
    if match is None:
        msg = "No csrf_token field in page body"
        raise LookupError(msg)
    return match.group(1)


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for snippetbox applications.

    Returns the same ``Response`` type used in production. Sends requests
    through the ASGI interface directly — no HTTP involved.

    Cookies set by responses are kept in ``cookies`` and sent back on
    later requests, like a browser would. A ``Max-Age=0`` cookie is
    removed from the jar.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 200
    """

    __slots__ = ("app", "client_addr", "cookies")

    def __init__(self, app: ASGIApp, *, client_addr: tuple[str, int] = ("127.0.0.1", 50000)) -> None:
        self.app = app
        self.cookies: dict[str, str] = {}
        self.client_addr = client_addr

    async def __aenter__(self) -> TestClient:
        ensure_frozen = getattr(self.app, "_ensure_frozen", None)
        if ensure_frozen is not None:
            ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        self.cookies.clear()

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        data: dict[str, str] | None = None,
    ) -> Response:
        """Send a POST request.

        *data* is sent url-encoded with the matching content type.
        """
        extra_headers: dict[str, str] = {}
        request_body = body or b""

        if data is not None:
            request_body = urlencode(data).encode("utf-8")
            extra_headers["content-type"] = "application/x-www-form-urlencoded"

        merged = {**extra_headers, **(headers or {})}
        return await self.request("POST", path, headers=merged, body=request_body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        # Split path and query string
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        # Build raw ASGI headers
        raw_headers: list[tuple[bytes, bytes]] = []
        explicit = {name.lower() for name in (headers or {})}
        if self.cookies and "cookie" not in explicit:
            jar = "; ".join(f"{name}={value}" for name, value in self.cookies.items())
            raw_headers.append((b"cookie", jar.encode("latin-1")))
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        scope: Scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "scheme": "http",
            "path": path_part,
            "raw_path": quote(path_part).encode("ascii"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": self.client_addr,
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self._call(scope, receive, send)

        content_type = "text/html; charset=utf-8"
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1")
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            elif name_str != "content-length":
                extra_headers.append((name_str, value_str))
                if name_str == "set-cookie":
                    self._store_cookie(value_str)

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )

    async def _call(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)

    def _store_cookie(self, header_value: str) -> None:
        pair, _, attributes = header_value.partition(";")
        name, _, value = pair.strip().partition("=")
        attrs = {k.lower(): v for k, v in parse_cookies(attributes).items()}
        if attrs.get("max-age") == "0":
            self.cookies.pop(name, None)
        else:
            self.cookies[name] = value
