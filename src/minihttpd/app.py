"""
=============================================================================
ROUTE TABLE
=============================================================================

Wires the handlers into a Router in their fixed priority order and
exposes the dispatcher entry point:

    dispatch(request, config) → HTTPResponse

The dispatcher is a pure function of the request and the configuration
(plus whatever the filesystem holds), so it can be driven directly from
tests without any sockets.

=============================================================================
"""

from typing import Optional

from .config import ServerConfig
from .handlers import EchoHandler, FileHandler, index, user_agent
from .http.request import HTTPRequest
from .http.response import HTTPResponse
from .http.router import Router, RouteType
from .storage import FileStorage


def create_router(
    config: ServerConfig,
    storage: Optional[FileStorage] = None,
) -> Router:
    """
    Build the router for a configuration.

    Args:
        config: Supplies the base directory for /files/.
        storage: Override the file storage (defaults to one rooted at
                 config.directory).

    Returns:
        Router with the five routes registered. ORDER MATTERS.
    """
    storage = storage or FileStorage(config.directory)

    router = Router()
    router.add_route("/", index, RouteType.EXACT)
    router.add_route("/echo/", EchoHandler().handle, RouteType.CONTAINS, name="echo")
    router.add_route("/user-agent", user_agent, RouteType.EXACT)
    router.add_route("/files/", FileHandler(storage).handle, RouteType.CONTAINS, name="files")
    return router


def dispatch(request: HTTPRequest, config: ServerConfig) -> HTTPResponse:
    """
    Route one request against a fresh route table.

    Convenience for one-off calls. The server builds its router once and
    reuses it.
    """
    return create_router(config).handle(request)
