"""
=============================================================================
minihttpd
=============================================================================

A small HTTP/1.1 server on raw sockets:

    GET  /                  200, empty
    *    /echo/<text>       200, text echoed back (gzip if accepted)
    GET  /user-agent        200, the User-Agent header
    GET  /files/<name>      200 file bytes / 404
    POST /files/<name>      201 written / 500
    *    /files/<name>      501
    *    anything else      404

One connection at a time, one request per connection.

    from minihttpd import HTTPServer, ServerConfig

    HTTPServer(ServerConfig(directory="/srv/files")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig
from .app import create_router, dispatch

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "create_app",
    "create_router",
    "dispatch",
    "__version__",
]
