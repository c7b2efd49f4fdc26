"""
=============================================================================
CORE NETWORKING
=============================================================================

    socket_server.py   listening socket + sequential accept loop
    connection.py      one client: single read, head/body writes, close

No thread pool: connections are handled one after another on the thread
that called SocketServer.start().

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
