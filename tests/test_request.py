"""Tests for the immutable Request."""

import pytest

from snippetbox.errors import BadRequest
from snippetbox.http.request import Request


def _request(
    method: str = "GET",
    path: str = "/",
    *,
    query: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
    body: bytes = b"",
    client: tuple[str, int] | None = ("10.0.0.5", 41234),
) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query,
        "headers": headers or [],
        "http_version": "1.1",
        "client": client,
    }
    chunks = [body[:3], body[3:]]

    async def receive() -> dict:
        chunk = chunks.pop(0)
        return {"type": "http.request", "body": chunk, "more_body": bool(chunks)}

    return Request.from_asgi(scope, receive)


class TestRequest:
    def test_uri_includes_query(self) -> None:
        assert _request(path="/snippet/view/1", query=b"a=1").uri == "/snippet/view/1?a=1"
        assert _request(path="/").uri == "/"

    def test_remote_addr_and_proto(self) -> None:
        request = _request()
        assert request.remote_addr == "10.0.0.5:41234"
        assert request.proto == "HTTP/1.1"

    def test_cookies_parsed(self) -> None:
        request = _request(headers=[(b"cookie", b"session=abc")])
        assert request.cookies == {"session": "abc"}

    def test_with_context_returns_new_request(self) -> None:
        request = _request()
        derived = request.with_context(is_authenticated=True)
        assert derived.context.is_authenticated
        assert not request.context.is_authenticated

    def test_derived_requests_share_staged_headers(self) -> None:
        request = _request()
        derived = request.with_context(is_authenticated=True).with_path_params({"id": "1"})
        derived.response_headers.set("Cache-Control", "no-store")
        assert request.response_headers.get("Cache-Control") == "no-store"
        assert derived.path_params == {"id": "1"}

    async def test_body_read_once_and_cached(self) -> None:
        request = _request("POST", body=b"title=hello")
        assert await request.body() == b"title=hello"
        assert await request.body() == b"title=hello"

    async def test_form_shared_by_derived_requests(self) -> None:
        request = _request(
            "POST",
            body=b"a=1",
            headers=[(b"content-type", b"application/x-www-form-urlencoded")],
        )
        form = await request.form()
        assert await request.with_context(csrf_token="t").form() is form

    async def test_malformed_form(self) -> None:
        request = _request(
            "POST",
            body=b"a=%G1",
            headers=[(b"content-type", b"application/x-www-form-urlencoded")],
        )
        with pytest.raises(BadRequest):
            await request.form()
