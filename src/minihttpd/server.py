"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                           │
    │                        │   HTTPServer    │                           │
    │                        └────────┬────────┘                           │
    │            ┌────────────────────┼────────────────────┐               │
    │            ▼                    ▼                    ▼               │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐         │
    │    │ SocketServer │    │RequestParser │    │ Middleware + │         │
    │    │ (accept loop)│    │ (body mode)  │    │    Router    │         │
    │    └──────┬───────┘    └──────────────┘    └──────────────┘         │
    │           ▼                                                          │
    │    ┌──────────────┐                                                  │
    │    │  Connection  │  one read, head + body writes, close             │
    │    └──────────────┘                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts and wraps the socket in a Connection
    2. Connection.read_request()        single recv(buffer_size)
    3. RequestParser.parse()            HTTPParseError → 400, close
    4. middleware → Router.handle()     any Exception → 500 (logged)
    5. HTTPResponse.validate()          Content-Length must match body
    6. Connection.send_response()       head, then body
    7. Connection.close()

Everything runs on the accept thread; the next client waits its turn.

=============================================================================
"""

import logging
from typing import Callable, Optional, Tuple

from .app import create_router
from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .http import (
    HTTPParseError, HTTPRequest, HTTPResponse, HTTPStatus,
    RequestParser, Router, bad_request, internal_error,
)
from .middleware import Middleware, MiddlewarePipeline
from .storage import FileStorage


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The minihttpd server.

    Usage:
        server = HTTPServer(ServerConfig(directory="/srv/files"))
        server.use(LoggingMiddleware())
        server.run()                      # Blocks until SIGINT/SIGTERM

    Args:
        config: Server configuration; validated immediately.
        storage: File storage for /files/ (defaults to config.directory).
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        storage: Optional[FileStorage] = None,
    ):
        self.config = config or ServerConfig()
        self.config.validate()  # Fail fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(body_mode=self.config.body_mode)
        self._router = create_router(self.config, storage)
        self._middleware = MiddlewarePipeline()
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware. First added runs outermost.

        Returns self for chaining.
        """
        self._middleware.add(middleware)
        self._handler = None
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    @property
    def handler(self) -> Callable[[HTTPRequest], HTTPResponse]:
        """Router wrapped in the middleware pipeline, built on first use."""
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)
        return self._handler

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, setup_logging: bool = True):
        """
        Serve until shutdown() or SIGINT/SIGTERM (blocking).

        Args:
            setup_logging: Configure the root logger from config.log_level.

        Raises:
            OSError: The address could not be bound.
        """
        if setup_logging:
            self._setup_logging()

        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port} "
            f"(directory={self.config.directory}, body_mode={self.config.body_mode.value})"
        )
        for line in self._router.describe():
            logger.debug(f"Route: {line}")

        try:
            self._socket_server.start(self.handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Safe to call from another thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttpd").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def handle_connection(self, conn: Connection):
        """
        Serve exactly one request on `conn`, then close it.

        Never raises: a failure on one connection must not stop the
        accept loop.
        """
        with conn:
            try:
                raw = conn.read_request()
            except TimeoutError:
                logger.warning(f"[{conn.id}] No request from {conn.client_ip} within timeout")
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            try:
                request = self._parser.parse(raw, conn.address)
            except HTTPParseError as e:
                logger.info(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                conn.send_response(self._error_response(e.status_code))
                return

            conn.state = ConnectionState.PROCESSING
            response = self._dispatch(conn, request)
            conn.send_response(response)

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        try:
            response = self.handler(request)
            response.validate()
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error for {request.method} {request.path}: {e}")
            return internal_error()
        return response

    @staticmethod
    def _error_response(status_code: int) -> HTTPResponse:
        if status_code == HTTPStatus.BAD_REQUEST:
            return bad_request()
        try:
            return HTTPResponse(status=HTTPStatus(status_code))
        except ValueError:
            return bad_request()


def create_app(
    config: Optional[ServerConfig] = None,
    storage: Optional[FileStorage] = None,
) -> HTTPServer:
    """Factory for an HTTPServer."""
    return HTTPServer(config, storage)
