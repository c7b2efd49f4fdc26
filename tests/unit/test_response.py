"""
Unit tests for HTTP response building and serialization.
"""

import pytest

from minihttpd.http.response import (
    HTTPResponse,
    ResponseBuilder,
    bad_request,
    created,
    internal_error,
    not_found,
    not_implemented,
    ok,
)
from minihttpd.http.status_codes import HTTPStatus


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_values(self):
        """Test status code values."""
        assert HTTPStatus.OK == 200
        assert HTTPStatus.CREATED == 201
        assert HTTPStatus.BAD_REQUEST == 400
        assert HTTPStatus.NOT_FOUND == 404
        assert HTTPStatus.INTERNAL_SERVER_ERROR == 500
        assert HTTPStatus.NOT_IMPLEMENTED == 501

    def test_status_phrases(self):
        """Test status reason phrases."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.CREATED.phrase == "Created"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.phrase == "Internal Server Error"
        assert HTTPStatus.NOT_IMPLEMENTED.phrase == "Not Implemented"

    def test_status_categories(self):
        """Test status code categories."""
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.CREATED.is_success
        assert not HTTPStatus.OK.is_error

        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.NOT_IMPLEMENTED.is_error
        assert not HTTPStatus.NOT_FOUND.is_success


class TestSerialization:
    """Tests for the wire format."""

    def test_bare_response(self):
        assert HTTPResponse().to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_headers_in_insertion_order(self):
        response = HTTPResponse(
            headers=[("Content-Type", "text/plain"), ("Content-Length", "3")],
            body=b"abc",
        )

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_head_excludes_body(self):
        response = ResponseBuilder().text("abc").build()

        assert response.head_bytes().endswith(b"\r\n\r\n")
        assert b"abc" not in response.head_bytes()
        assert response.to_bytes() == response.head_bytes() + b"abc"

    def test_binary_body_is_verbatim(self):
        body = b"\x1f\x8b\x00\xff\r\n\r\n"
        response = ResponseBuilder().octet_stream(body).build()

        assert response.to_bytes().endswith(body)

    def test_status_line(self):
        assert not_found().status_line == "HTTP/1.1 404 Not Found"
        assert not_implemented().status_line == "HTTP/1.1 501 Not Implemented"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_text_response(self):
        response = ResponseBuilder().text("abc").build()

        assert response.status == HTTPStatus.OK
        assert response.headers == [
            ("Content-Type", "text/plain"),
            ("Content-Length", "3"),
        ]
        assert response.body == b"abc"

    def test_content_length_counts_utf8_bytes(self):
        response = ResponseBuilder().text("héllo").build()

        assert response.get_header("Content-Length") == "6"

    def test_octet_stream(self):
        response = ResponseBuilder().octet_stream(b"\x00\x01").build()

        assert response.get_header("Content-Type") == "application/octet-stream"
        assert response.get_header("Content-Length") == "2"

    def test_header_replaces_in_place(self):
        response = (ResponseBuilder()
            .header("A", "1")
            .header("B", "2")
            .header("A", "3")
            .build())

        assert response.headers == [("A", "3"), ("B", "2")]

    def test_custom_status(self):
        response = ResponseBuilder().status(HTTPStatus.CREATED).build()

        assert response.status == HTTPStatus.CREATED
        assert response.headers == []


class TestHTTPResponse:
    """Tests for HTTPResponse methods."""

    def test_get_header_is_case_sensitive(self):
        response = HTTPResponse(headers=[("Content-Type", "text/plain")])

        assert response.get_header("Content-Type") == "text/plain"
        assert response.get_header("content-type") is None

    def test_set_header(self):
        response = HTTPResponse(headers=[("A", "1")])
        response.set_header("A", "2").set_header("B", "3")

        assert response.headers == [("A", "2"), ("B", "3")]

    def test_validate_accepts_matching_length(self):
        ResponseBuilder().text("abc").build().validate()

    def test_validate_accepts_missing_length(self):
        HTTPResponse(body=b"").validate()

    def test_validate_rejects_mismatch(self):
        response = HTTPResponse(headers=[("Content-Length", "5")], body=b"abc")

        with pytest.raises(ValueError):
            response.validate()


class TestConvenienceFunctions:
    """Tests for response convenience functions."""

    def test_ok_without_text_is_bare(self):
        response = ok()

        assert response.status == HTTPStatus.OK
        assert response.headers == []
        assert response.body == b""

    def test_ok_with_text(self):
        response = ok("foo/1.0")

        assert response.body == b"foo/1.0"
        assert response.get_header("Content-Length") == "7"

    @pytest.mark.parametrize("factory,status", [
        (created, HTTPStatus.CREATED),
        (bad_request, HTTPStatus.BAD_REQUEST),
        (not_found, HTTPStatus.NOT_FOUND),
        (internal_error, HTTPStatus.INTERNAL_SERVER_ERROR),
        (not_implemented, HTTPStatus.NOT_IMPLEMENTED),
    ])
    def test_error_helpers_are_empty(self, factory, status):
        response = factory()

        assert response.status == status
        assert response.headers == []
        assert response.body == b""
