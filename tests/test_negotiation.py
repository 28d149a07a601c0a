"""Tests for negotiate — handler return values to Responses."""

import pytest

from snippetbox.errors import ConfigurationError
from snippetbox.http.response import Redirect, Response
from snippetbox.server.negotiation import negotiate


class TestNegotiate:
    def test_response_passes_through(self) -> None:
        response = Response("x", status=201)
        assert negotiate(response) is response

    def test_string_is_html(self) -> None:
        response = negotiate("<p>hi</p>")
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"

    def test_bytes_is_octet_stream(self) -> None:
        assert negotiate(b"\x00").content_type == "application/octet-stream"

    def test_tuple_overrides_status(self) -> None:
        assert negotiate(("created", 201)).status == 201

    def test_redirect_with_custom_status(self) -> None:
        response = negotiate(Redirect("/", status=302))
        assert response.status == 302
        assert response.header("location") == "/"

    def test_unsupported_type_is_programming_error(self) -> None:
        with pytest.raises(ConfigurationError, match="dict"):
            negotiate({"a": 1})
