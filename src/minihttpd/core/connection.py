"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket: one read in, two writes out, close.

=============================================================================
ONE READ, NOT A READ LOOP
=============================================================================

TCP is a byte stream, so a complete HTTP request may in principle arrive
over several recv() calls. This server deliberately performs a single
recv() of `buffer_size` bytes and treats the result as the request:

    recv(1024) ──► b"GET /echo/abc HTTP/1.1\r\nHost: ...\r\n\r\n"
                    └──────────── the whole request ────────────┘

Small requests from well-behaved clients arrive in one segment, and that
is all this server promises to handle. Larger requests are truncated.

=============================================================================
TWO WRITES
=============================================================================

    sendall(response.head_bytes())   # status line + headers + blank line
    sendall(response.body)           # raw body bytes (skipped if empty)

The body never passes through text formatting, so gzip or file bytes go
out exactly as produced.

=============================================================================
LIFECYCLE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
               │                                      ▲
               └──── empty read / parse error ────────┘

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client (ip, port).
        id: Short random id used to tag log lines.
        state: Current ConnectionState.
        created_at: Accept time (time.time()).
        buffer_size: Maximum bytes read for the request.
        timeout: Socket timeout in seconds; None blocks forever.
    """

    socket: socket.socket
    address: Tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = 30.0

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read the request with a single recv().

        Returns:
            Up to buffer_size bytes. b"" if the client closed without
            sending anything (the parser turns that into GET /).

        Raises:
            TimeoutError: The client sent nothing within `timeout`.
        """
        self.state = ConnectionState.READING
        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            raise TimeoutError("Request read timeout") from None
        except (ConnectionResetError, BrokenPipeError):
            data = b""

        logger.debug(f"[{self.id}] Read {len(data)} bytes from {self.client_ip}")
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, response: HTTPResponse) -> bool:
        """
        Write the response as head + body.

        Returns:
            True if everything was sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(response.head_bytes())
            if response.body:
                self.socket.sendall(response.body)
            return True
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN so the client sees end-of-stream right
        after the body, then the descriptor is released. Safe to call twice.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
