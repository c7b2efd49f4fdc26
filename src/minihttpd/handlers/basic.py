"""
Stateless handlers: the root greeting and User-Agent reflection.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok


def index(request: HTTPRequest) -> HTTPResponse:
    """GET / → 200 with no headers and no body, whatever the request says."""
    return ok()


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    Reflect the User-Agent header as text/plain.

        User-Agent: foo/1.0   →   Content-Length: 7, body "foo/1.0"

    A missing header gives an empty body with Content-Length: 0.
    """
    return ok(request.user_agent)
