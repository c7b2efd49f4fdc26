"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m minihttpd                              # /tmp, 127.0.0.1:4221
    python -m minihttpd --directory /srv/files       # serve /files/ from here
    python -m minihttpd --host 0.0.0.0 --port 8080
    python -m minihttpd --body-mode content-length   # exact POST bodies

Every flag falls back to its environment variable (HTTP_DIRECTORY,
HTTP_HOST, HTTP_PORT, HTTP_LOG_LEVEL, HTTP_BODY_MODE), then to the
ServerConfig default.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .http.request import BodyMode
from .middleware import LoggingMiddleware
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttpd",
        description="Minimal HTTP/1.1 server: echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttpd                             # Run with defaults
  python -m minihttpd --directory ./files         # Base directory for /files/
  python -m minihttpd --port 8080 --log-level DEBUG
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Base directory for /files/<name> (default: $HTTP_DIRECTORY or /tmp)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: $HTTP_HOST or 127.0.0.1)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: $HTTP_PORT or 4221)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # BEHAVIOR
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--body-mode",
        choices=[mode.value for mode in BodyMode],
        default=None,
        help="Request body extraction (default: $HTTP_BODY_MODE or last-line)"
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: $HTTP_LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttpd {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig.from_env().with_overrides(
            directory=args.directory,
            host=args.host,
            port=args.port,
            body_mode=args.body_mode,
            log_level=args.log_level,
        )
        server = HTTPServer(config)
        server.use(LoggingMiddleware(log_format=config.log_format))
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
