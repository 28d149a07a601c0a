"""Tests for the exception hierarchy and error responses."""

import logging

import pytest

from snippetbox.errors import (
    BadRequest,
    ConfigurationError,
    DuplicateEmailError,
    HTTPError,
    InvalidCredentialsError,
    MethodNotAllowed,
    ModelError,
    NoRecordError,
    NotFound,
    SnippetboxError,
)
from snippetbox.http.request import Request
from snippetbox.server.errors import client_error, http_error_response, server_error, status_text


def _request() -> Request:
    scope = {"type": "http", "method": "GET", "path": "/x", "headers": []}

    async def receive() -> dict:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request.from_asgi(scope, receive)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [ConfigurationError, HTTPError, NoRecordError, InvalidCredentialsError, DuplicateEmailError],
    )
    def test_all_are_snippetbox_errors(self, exc_type: type) -> None:
        assert issubclass(exc_type, SnippetboxError)

    def test_model_errors(self) -> None:
        for exc_type in (NoRecordError, InvalidCredentialsError, DuplicateEmailError):
            assert issubclass(exc_type, ModelError)

    def test_http_error_statuses(self) -> None:
        assert BadRequest().status == 400
        assert NotFound().status == 404
        assert MethodNotAllowed(frozenset({"GET"})).status == 405

    def test_allow_header_sorted(self) -> None:
        exc = MethodNotAllowed(frozenset({"POST", "GET", "HEAD"}))
        assert exc.headers == (("Allow", "GET, HEAD, POST"),)


class TestErrorResponses:
    def test_status_text(self) -> None:
        assert status_text(404) == "Not Found"
        assert status_text(599) == "599"

    def test_client_error_is_plain_text(self) -> None:
        response = client_error(400)
        assert response.text == "Bad Request"
        assert response.content_type == "text/plain; charset=utf-8"

    def test_http_error_response_carries_headers(self) -> None:
        response = http_error_response(MethodNotAllowed(frozenset({"POST"})), _request())
        assert response.status == 405
        assert response.header("Allow") == "POST"

    def test_server_error_hides_detail_and_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        try:
            raise KeyError("secret-detail")
        except KeyError as exc:
            with caplog.at_level(logging.ERROR, logger="snippetbox.server"):
                response = server_error(exc, _request())
        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "secret-detail" not in response.text
        (record,) = caplog.records
        assert record.exc_info is not None
        assert "GET /x" in record.getMessage()
