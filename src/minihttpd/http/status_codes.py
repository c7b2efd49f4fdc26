"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The closed set of status codes this server can answer with.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  Code  │  When we send it                                          │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  200   │ "/", echo, user-agent, file read                          │
    │  201   │ file written (POST /files/<name>)                         │
    │  400   │ request line could not be parsed                          │
    │  404   │ unknown path, or file missing/unreadable                  │
    │  500   │ file write failed, or a handler raised                    │
    │  501   │ any method other than GET/POST on /files/<name>           │
    └────────┴───────────────────────────────────────────────────────────┘

Nothing else is ever put on the wire, so the enum stays small on purpose:
a response with a code outside this table is a bug.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes with their reason phrases.

    Behaves like an int, so comparisons against literals work:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200                        # Request succeeded
    CREATED = 201                   # File was created/overwritten
    BAD_REQUEST = 400               # Malformed request line
    NOT_FOUND = 404                 # No route, or no such file
    INTERNAL_SERVER_ERROR = 500     # Write failure / handler crash
    NOT_IMPLEMENTED = 501           # Unsupported method on /files/

    @property
    def phrase(self) -> str:
        """
        Reason phrase used in the status line.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        """True for 2xx codes."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx codes."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
