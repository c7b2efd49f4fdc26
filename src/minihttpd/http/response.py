"""
=============================================================================
HTTP RESPONSE MODEL AND SERIALIZER
=============================================================================

Builds HTTPResponse objects and renders them to HTTP/1.1 bytes.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK\r\n                   ← status line                │
    │  Content-Type: text/plain\r\n          ┐                            │
    │  Content-Length: 23\r\n                ├ headers, in list order     │
    │  Content-Encoding: gzip\r\n            ┘                            │
    │  \r\n                                  ← blank line                 │
    │  <23 bytes of gzip data>               ← body, verbatim             │
    └─────────────────────────────────────────────────────────────────────┘

The status line, headers and blank line form the HEAD. The body follows
as a separate write so binary content is never pushed through str
formatting.

Nothing is added behind the caller's back: no Date, no Server, no
automatic Content-Length. "GET /" is answered with exactly

    HTTP/1.1 200 OK\r\n\r\n

=============================================================================
CONTENT-LENGTH INVARIANT
=============================================================================

Whenever a response carries Content-Length, it equals len(body) of the
bytes actually written. ResponseBuilder.body() sets both at once, and
HTTPResponse.validate() checks it before anything hits the socket.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .status_codes import HTTPStatus


Header = Tuple[str, str]


@dataclass
class HTTPResponse:
    """
    A response ready to be serialized.

    Headers are an ordered list of (name, value) pairs: the order is the
    order on the wire.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: List[Header] = field(default_factory=list)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """"HTTP/1.1 404 Not Found" style status line (no CRLF)."""
        return f"{self.version} {self.status.value} {self.status.phrase}"

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Value of the first header called `name` (case-sensitive)."""
        for header_name, value in self.headers:
            if header_name == name:
                return value
        return default

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a header, keeping its position if it already exists.

        Returns self for chaining.
        """
        for index, (header_name, _) in enumerate(self.headers):
            if header_name == name:
                self.headers[index] = (name, value)
                return self
        self.headers.append((name, value))
        return self

    def validate(self) -> None:
        """
        Check the Content-Length invariant.

        Raises:
            ValueError: Content-Length is present and does not match the body.
        """
        declared = self.get_header("Content-Length")
        if declared is not None and declared != str(len(self.body)):
            raise ValueError(
                f"Content-Length {declared} does not match body of {len(self.body)} bytes"
            )

    def head_bytes(self) -> bytes:
        """
        Status line + headers + blank line, as bytes.

        This is the first of the two writes.
        """
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers)
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    def to_bytes(self) -> bytes:
        """The complete response: head followed by the body verbatim."""
        return self.head_bytes() + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Headers appear on the wire in the order the builder methods are called:

        (ResponseBuilder()
            .content_type("text/plain")      # 1. Content-Type
            .body(compressed)                # 2. Content-Length
            .header("Content-Encoding", "gzip")  # 3. Content-Encoding
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: List[Header] = []
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add or replace a header."""
        for index, (header_name, _) in enumerate(self._headers):
            if header_name == name:
                self._headers[index] = (name, value)
                return self
        self._headers.append((name, value))
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the body and its Content-Length.

        Strings are encoded as UTF-8, and the length is the byte length
        of the encoded form.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        return self.header("Content-Length", str(len(body)))

    def text(self, text: Union[str, bytes]) -> "ResponseBuilder":
        """text/plain body (no charset parameter)."""
        return self.content_type("text/plain").body(text)

    def octet_stream(self, content: bytes) -> "ResponseBuilder":
        """application/octet-stream body, for file downloads."""
        return self.content_type("application/octet-stream").body(content)

    def build(self) -> HTTPResponse:
        """Create the HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            headers=list(self._headers),
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Every non-200 response this server sends has an empty body and no
# headers, so these are one-liners.
#
# =============================================================================

def ok(text: Optional[Union[str, bytes]] = None) -> HTTPResponse:
    """
    200 OK.

    Without an argument the response is bare (no headers, no body);
    with one it is a text/plain response.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)
    if text is not None:
        builder.text(text)
    return builder.build()


def created() -> HTTPResponse:
    """201 Created, empty."""
    return HTTPResponse(status=HTTPStatus.CREATED)


def bad_request() -> HTTPResponse:
    """400 Bad Request, empty."""
    return HTTPResponse(status=HTTPStatus.BAD_REQUEST)


def not_found() -> HTTPResponse:
    """404 Not Found, empty."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)


def internal_error() -> HTTPResponse:
    """500 Internal Server Error, empty. Never carries error details."""
    return HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR)


def not_implemented() -> HTTPResponse:
    """501 Not Implemented, empty."""
    return HTTPResponse(status=HTTPStatus.NOT_IMPLEMENTED)
