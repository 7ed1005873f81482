"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m simplewebserver

    # Custom port and document root
    python -m simplewebserver --port 3000 --root ./public

    # Listen on all interfaces (for containers)
    python -m simplewebserver --host 0.0.0.0

    # Wait forever for slow clients
    python -m simplewebserver --timeout 0

Environment variables (WEB_HOST, WEB_PORT, WEB_ROOT, WEB_TIMEOUT,
WEB_LOG_LEVEL) provide the defaults; flags override them.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig
from .server import WebServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, using `defaults` for every option."""
    parser = argparse.ArgumentParser(
        prog="simplewebserver",
        description="Minimal one-request-per-connection HTTP/1.1 file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m simplewebserver                        # Serve . on 127.0.0.1:8080
  python -m simplewebserver --port 3000            # Custom port
  python -m simplewebserver --root ./public        # Custom document root
  python -m simplewebserver --host 0.0.0.0         # Listen on all interfaces
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on, 0 for any free port (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help="Seconds to wait for a client's request, 0 to wait forever "
             f"(default: {defaults.timeout})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.root,
        help=f"Document root (default: {defaults.root})"
    )

    parser.add_argument(
        "--server-name",
        default=defaults.server_name,
        help=f"Value of the Server header (default: {defaults.server_name!r})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"simplewebserver {__version__}"
    )

    return parser


def main(argv=None):
    """Parse arguments, build the server, run until interrupted."""
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment: {e}", file=sys.stderr)
        sys.exit(2)

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout or None,
        root=args.root,
        server_name=args.server_name,
        log_level=args.log_level,
    )

    try:
        server = WebServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
