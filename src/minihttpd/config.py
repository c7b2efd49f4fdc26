"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

One immutable ServerConfig is built at startup (CLI flags over environment
variables over defaults) and passed explicitly to every component that
needs it. Request handling never reads process-wide state.

=============================================================================
SOURCES, LOWEST TO HIGHEST PRIORITY
=============================================================================

    1. Dataclass defaults               directory=/tmp, port=4221, ...
    2. Environment (from_env)           HTTP_DIRECTORY=/srv/files
    3. Command line (__main__)          --directory /srv/files

=============================================================================
"""

import os
import tempfile
from dataclasses import dataclass, field, replace
from typing import Optional

from .http.request import BodyMode


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    Frozen: share it freely, derive variants with with_overrides().
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: str = field(default_factory=tempfile.gettempdir)
    """
    Base directory for /files/<name>. Defaults to the platform temporary
    directory ("/tmp" on Linux).
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Interface to bind. "0.0.0.0" for every interface."""

    port: int = 4221
    """TCP port to listen on. 0 lets the OS pick one (tests)."""

    backlog: int = 128
    """Pending-connection queue length passed to listen()."""

    buffer_size: int = 1024
    """
    Size of the single read that receives a request. Anything the client
    sends beyond this is ignored.
    """

    timeout: Optional[float] = 30.0
    """Per-connection socket timeout in seconds. None blocks forever."""

    # ─────────────────────────────────────────────────────────────────────
    # PARSING
    # ─────────────────────────────────────────────────────────────────────

    body_mode: BodyMode = BodyMode.LAST_LINE
    """How the request body is extracted (see http.request.BodyMode)."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: "text" (Apache-like) or "json"."""

    server_name: str = "minihttpd/1.0"
    """Name shown in the startup log. Not sent on the wire."""

    def __post_init__(self):
        # Accept the plain string form ("content-length") as well
        object.__setattr__(self, "body_mode", BodyMode(self.body_mode))

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Build configuration from environment variables.

            HTTP_DIRECTORY   Base directory for /files/
            HTTP_HOST        Bind address
            HTTP_PORT        Port
            HTTP_TIMEOUT     Socket timeout (seconds)
            HTTP_LOG_LEVEL   Logging level
            HTTP_LOG_FORMAT  "text" or "json"
            HTTP_BODY_MODE   "last-line" or "content-length"

        Unset variables keep the dataclass defaults.
        """
        defaults = cls()
        return cls(
            directory=os.getenv("HTTP_DIRECTORY", defaults.directory),
            host=os.getenv("HTTP_HOST", defaults.host),
            port=int(os.getenv("HTTP_PORT", str(defaults.port))),
            timeout=float(os.getenv("HTTP_TIMEOUT", str(defaults.timeout))),
            log_level=os.getenv("HTTP_LOG_LEVEL", defaults.log_level),
            log_format=os.getenv("HTTP_LOG_FORMAT", defaults.log_format),
            body_mode=os.getenv("HTTP_BODY_MODE", defaults.body_mode.value),
        )

    def with_overrides(self, **changes) -> "ServerConfig":
        """
        Copy with some fields replaced. None values are ignored, so
        unset CLI flags can be passed straight through.
        """
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> None:
        """
        Fail fast on bad values.

        Raises:
            ValueError: Describing the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size < 16:
            raise ValueError("buffer_size must be >= 16")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in _LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format}")

        if not os.path.isdir(self.directory):
            raise ValueError(f"Directory does not exist: {self.directory}")
