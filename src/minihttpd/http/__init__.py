"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between raw bytes and handler logic:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py      bytes → HTTPRequest (RequestParser, BodyMode)       │
    │ encoding.py     Accept-Encoding → EncodingChoice                    │
    │ compression.py  content-coding token → encoder (gzip)               │
    │ router.py       path → handler (exact / contains, first match wins) │
    │ response.py     HTTPResponse, ResponseBuilder, head/body bytes      │
    │ status_codes.py HTTPStatus (200, 201, 400, 404, 500, 501)           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    MalformedRequest,
    BodyMode,
    parse_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    created,
    bad_request,
    not_found,
    internal_error,
    not_implemented,
)
from .encoding import EncodingChoice, negotiate_encoding, SUPPORTED_ENCODINGS
from .compression import compress
from .router import Router, Route, RouteType
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "MalformedRequest",
    "BodyMode",
    "parse_request",

    # Responses
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "bad_request",
    "not_found",
    "internal_error",
    "not_implemented",

    # Content negotiation
    "EncodingChoice",
    "negotiate_encoding",
    "SUPPORTED_ENCODINGS",
    "compress",

    # Routing
    "Router",
    "Route",
    "RouteType",

    # Status codes
    "HTTPStatus",
]
