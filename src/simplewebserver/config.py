"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the web server.

Everything that identifies the server or names a file on disk lives here
instead of being baked into the protocol code: the Server header, the
default and fallback documents, the template tokens. Tests swap these out
for fixtures; deployments override them from the CLI or the environment.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m simplewebserver --port 3000                     │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEB_PORT=3000 python -m simplewebserver                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the web server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    DOCUMENTS
    - root, default_document, not_found_document, mime_type

    TEMPLATES
    - templated_extension, date_token, server_token, server_label, encoding

    IDENTITY / LOGGING
    - server_name, log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """IP address to bind to. "0.0.0.0" for all interfaces."""

    port: int = 8080
    """Port to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    timeout: Optional[float] = 30.0
    """
    Read timeout for a client connection in seconds.
    None = wait forever for the request line (the classic behavior,
    a silent client then holds its worker thread indefinitely).
    """

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENTS
    # ─────────────────────────────────────────────────────────────────────

    root: str = "."
    """Directory request paths are resolved against."""

    default_document: str = "test.html"
    """Served for `GET /`."""

    not_found_document: str = "404page.html"
    """Fallback document served (under root) with every 404."""

    mime_type: str = "text/html"
    """Content-Type sent for every response, whatever the file type."""

    # ─────────────────────────────────────────────────────────────────────
    # TEMPLATES
    # ─────────────────────────────────────────────────────────────────────

    templated_extension: str = ".html"
    date_token: str = "<cs371date>"
    server_token: str = "<cs371server>"
    server_label: str = "Julio's Server"
    encoding: str = "utf-8"

    # ─────────────────────────────────────────────────────────────────────
    # IDENTITY / LOGGING
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "Julio's very own server"
    """Value of the Server header."""

    log_level: str = "INFO"

    @property
    def root_path(self) -> Path:
        """The document root as a resolved absolute path."""
        return Path(self.root).resolve()

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEB_HOST        Server host (default: 127.0.0.1)
        WEB_PORT        Server port (default: 8080)
        WEB_ROOT        Document root (default: current directory)
        WEB_TIMEOUT     Read timeout in seconds, "none" to disable (default: 30)
        WEB_LOG_LEVEL   Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("WEB_TIMEOUT", "30")
        return cls(
            host=os.getenv("WEB_HOST", "127.0.0.1"),
            port=int(os.getenv("WEB_PORT", "8080")),
            root=os.getenv("WEB_ROOT", "."),
            timeout=None if timeout.lower() == "none" else float(timeout),
            log_level=os.getenv("WEB_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast at startup rather than on the first request.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.root_path.is_dir():
            raise ValueError(f"Document root does not exist: {self.root}")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
