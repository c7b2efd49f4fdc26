"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes of a single read from the client socket into an immutable
HTTPRequest.

=============================================================================
WHAT WE RECEIVE
=============================================================================

The server performs exactly ONE read of at most `buffer_size` bytes
(1024 by default). Whatever arrived in that read is the whole request as
far as the parser is concerned:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  POST /files/notes.txt HTTP/1.1\r\n       ← request line            │
    │  Host: localhost:4221\r\n                 ┐                         │
    │  Content-Length: 5\r\n                    ├ headers                 │
    │  Content-Type: application/octet-stream\r\n┘                        │
    │  \r\n                                     ← blank separator line    │
    │  hello                                    ← body                    │
    └─────────────────────────────────────────────────────────────────────┘

Requests larger than the read buffer are silently truncated. That is a
documented limitation of this server, not a parse error.

=============================================================================
PARSING RULES
=============================================================================

1. LINES
   Decode as UTF-8 (bad bytes become U+FFFD), split on "\n" and drop
   the trailing "\r" of each line. A final terminator does not produce an
   extra empty line.

2. REQUEST LINE
   Split on whitespace. Token 1 is the method, token 2 the path.
   No lines at all?          → GET /   (fallback, never an error)
   Fewer than two tokens?    → MalformedRequest (400)

3. HEADERS
   Every line after the request line, up to the first blank line.
   Split on the first ": ". Names keep their case. If a name repeats,
   the LAST value wins. Lines without ": " are ignored.

4. BODY (see BodyMode)
   LAST_LINE       - the final line after the blank separator
   CONTENT_LENGTH  - the raw bytes after "\r\n\r\n", capped at
                     Content-Length

=============================================================================
BODY MODES
=============================================================================

LAST_LINE (default) handles one-line uploads. A body with embedded
newlines keeps only its final line, and binary bodies are decoded and
re-encoded as UTF-8 text.

CONTENT_LENGTH is byte-exact and is enabled via configuration
(--body-mode content-length).

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


class HTTPParseError(Exception):
    """
    Raised when raw bytes cannot be turned into a request.

    Carries the HTTP status that should be sent back before the server
    closes the connection.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class MalformedRequest(HTTPParseError):
    """The request line is missing its method or path token."""


class BodyMode(str, Enum):
    """
    Strategy used to pull the body out of the read buffer.

    Subclasses str so the values round-trip through argparse, environment
    variables and the config dataclass unchanged.
    """
    LAST_LINE = "last-line"
    CONTENT_LENGTH = "content-length"


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once per connection and never modified afterwards.

    Attributes:
        method:         Request method token ("GET", "POST", ...).
                        Not validated: unknown methods are routed like any
                        other and rejected by the handler that cares.
        path:           Request target exactly as sent. Never empty.
        headers:        Header name → value. Names are case-sensitive
                        ("User-Agent" and "user-agent" are different keys).
                        Stored as a read-only view of a private copy.
        body:           Raw body bytes, possibly empty.
        client_address: (ip, port) of the peer, for logging.
        raw:            The bytes the request was parsed from.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def get_header(self, name: str, default: str = "") -> str:
        """Case-sensitive header lookup."""
        return self.headers.get(name, default)

    @property
    def user_agent(self) -> str:
        """The User-Agent header, or "" when the client sent none."""
        return self.get_header("User-Agent")

    @property
    def content_length(self) -> int:
        """
        Content-Length as an unsigned integer.

        Returns 0 when the header is absent or is not a plain non-negative
        integer. The file-upload route only logs this value; it does not
        bound the number of bytes written.
        """
        value = parse_content_length(self.headers.get("Content-Length"))
        return value if value is not None else 0


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """
    Parse a Content-Length header value.

    Returns None for a missing value or anything that is not a run of
    ASCII digits ("-1", "5 bytes", "" and "0x10" are all rejected).
    """
    if value is None:
        return None
    value = value.strip()
    if not value.isascii() or not value.isdigit():
        return None
    return int(value)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    ==========================================================================
    PARSER PIPELINE
    ==========================================================================

        raw bytes
            │
            ├──► decode + split into lines
            │
            ├──► no lines?  ──────────────────────► GET /  (fallback)
            │
            ├──► request line ──► < 2 tokens? ────► MalformedRequest
            │
            ├──► header lines (until first blank line)
            │
            └──► body (according to body_mode)

    ==========================================================================
    USAGE
    ==========================================================================

        parser = RequestParser()
        request = parser.parse(b"GET /echo/abc HTTP/1.1\\r\\n\\r\\n")
        request.path   # "/echo/abc"

        parser = RequestParser(body_mode=BodyMode.CONTENT_LENGTH)

    ==========================================================================
    """

    HEADER_SEPARATOR = ": "

    def __init__(self, body_mode: BodyMode = BodyMode.LAST_LINE):
        """
        Args:
            body_mode: Body extraction strategy. Accepts a BodyMode or its
                       string value ("last-line", "content-length").
        """
        self.body_mode = BodyMode(body_mode)

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one request.

        Args:
            data: Bytes from the single socket read.
            client_address: Peer (ip, port), stored on the request.

        Returns:
            The parsed request.

        Raises:
            MalformedRequest: The request line lacks a path token.
        """
        lines = split_lines(data.decode("utf-8", errors="replace"))

        # ─────────────────────────────────────────────────────────────────
        # EMPTY READ: fall back to the root path
        # ─────────────────────────────────────────────────────────────────
        if not lines:
            return HTTPRequest(
                method="GET",
                path="/",
                client_address=client_address,
                raw=data,
            )

        method, path = self._parse_request_line(lines[0])

        header_lines, trailing_lines = self._split_header_block(lines[1:])
        headers = self._parse_headers(header_lines)

        if self.body_mode is BodyMode.CONTENT_LENGTH:
            body = self._body_by_length(data, headers)
        else:
            body = trailing_lines[-1].encode("utf-8") if trailing_lines else b""

        return HTTPRequest(
            method=method,
            path=path,
            headers=headers,
            body=body,
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(self, line: str) -> Tuple[str, str]:
        """
        Extract method and path from "METHOD PATH VERSION".

        The version token is not required and not checked.
        """
        tokens = line.split()
        if len(tokens) < 2:
            raise MalformedRequest(f"Invalid request line: {line!r}")
        return tokens[0], tokens[1]

    @staticmethod
    def _split_header_block(lines: List[str]) -> Tuple[List[str], List[str]]:
        """
        Split the lines after the request line at the first blank line.

        Returns (header_lines, lines_after_blank). When no blank line is
        present (truncated request), everything is treated as headers.
        """
        try:
            blank = lines.index("")
        except ValueError:
            return lines, []
        return lines[:blank], lines[blank + 1:]

    def _parse_headers(self, lines: List[str]) -> Dict[str, str]:
        """
        Build the header mapping.

        "Accept-Encoding: gzip, deflate" → {"Accept-Encoding": "gzip, deflate"}

        Duplicates overwrite earlier values.
        """
        headers: Dict[str, str] = {}
        for line in lines:
            name, sep, value = line.partition(self.HEADER_SEPARATOR)
            if not sep:
                continue  # Not a header line, skip it
            headers[name] = value
        return headers

    @staticmethod
    def _body_by_length(data: bytes, headers: Dict[str, str]) -> bytes:
        """
        Everything after the raw "\\r\\n\\r\\n", capped at Content-Length.

        Works on bytes, so binary payloads survive untouched.
        """
        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            return b""
        body = data[header_end + 4:]
        length = parse_content_length(headers.get("Content-Length"))
        if length is not None:
            body = body[:length]
        return body


def split_lines(text: str) -> List[str]:
    """
    Split text into lines on "\\n", dropping a trailing "\\r" per line.

        "a\\r\\nb\\r\\n"  → ["a", "b"]
        "a\\r\\n\\r\\n"   → ["a", ""]
        ""            → []
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_request(
    data: bytes,
    client_address: Tuple[str, int] = ("", 0),
    body_mode: BodyMode = BodyMode.LAST_LINE,
) -> HTTPRequest:
    """
    Parse a request in one call.

    Shortcut for RequestParser(body_mode).parse(data, client_address).
    """
    return RequestParser(body_mode=body_mode).parse(data, client_address)
