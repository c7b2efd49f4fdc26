"""
=============================================================================
ECHO HANDLER
=============================================================================

    GET /echo/abc                          GET /echo/abc
                                           Accept-Encoding: gzip
          │                                       │
          ▼                                       ▼
    HTTP/1.1 200 OK                        HTTP/1.1 200 OK
    Content-Type: text/plain               Content-Type: text/plain
    Content-Length: 3                      Content-Length: 23
                                           Content-Encoding: gzip
    abc                                    <gzip bytes of "abc">

The echoed text is the final "/" segment of the path, taken verbatim
(no percent-decoding). Any method is accepted.

=============================================================================
"""

import logging
from typing import Iterable

from ..http.compression import compress
from ..http.encoding import SUPPORTED_ENCODINGS, negotiate_encoding
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder
from ..http.router import last_segment


logger = logging.getLogger(__name__)


class EchoHandler:
    """
    Echoes the last path segment, gzip-compressed when negotiated.

    Args:
        supported: Content-coding tokens to acknowledge. Defaults to the
                   tokens that have an encoder ("gzip").
    """

    def __init__(self, supported: Iterable[str] = SUPPORTED_ENCODINGS):
        self.supported = tuple(supported)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        text = last_segment(request.path).encode("utf-8")
        choice = negotiate_encoding(request.headers, self.supported)

        builder = ResponseBuilder().content_type("text/plain")

        if choice.transform:
            body = compress(text, choice.transform)
            logger.debug(f"Echo body {choice.transform}: {len(text)} -> {len(body)} bytes")
        else:
            # Acknowledged-only tokens (if any) leave the body as-is
            body = text

        builder.body(body)
        if choice.header_value is not None:
            builder.header("Content-Encoding", choice.header_value)

        return builder.build()

    __call__ = handle
