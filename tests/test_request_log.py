"""Tests for access logging."""

import logging

from snippetbox.http.response import Response
from snippetbox.middleware import Chain, log_request
from snippetbox.testing import TestClient, asgi_app


class TestLogRequest:
    async def test_one_line_per_request(self, caplog) -> None:
        app = asgi_app(Chain(log_request).then_func(lambda r: "ok"))
        with caplog.at_level(logging.INFO, logger="snippetbox.access"):
            async with TestClient(app, client_addr=("10.0.0.5", 41234)) as client:
                await client.get("/snippet/view/1?x=2")

        lines = [r.getMessage() for r in caplog.records if r.name == "snippetbox.access"]
        assert lines == ["10.0.0.5:41234 - HTTP/1.1 GET /snippet/view/1?x=2"]

    async def test_response_unchanged(self) -> None:
        def handler(request) -> Response:
            return Response("body", status=201).with_header("X-Custom", "1")

        plain = asgi_app(Chain().then_func(handler))
        logged = asgi_app(Chain(log_request).then_func(handler))
        async with TestClient(plain) as client:
            expected = await client.get("/")
        async with TestClient(logged) as client:
            actual = await client.get("/")
        assert actual == expected

    async def test_logged_before_handler_runs(self, caplog) -> None:
        def handler(request) -> str:
            raise RuntimeError("handler failed")

        app = asgi_app(Chain(log_request).then_func(handler))
        with caplog.at_level(logging.INFO, logger="snippetbox.access"):
            async with TestClient(app) as client:
                response = await client.get("/fails")

        assert response.status == 500
        assert any("GET /fails" in r.getMessage() for r in caplog.records)
