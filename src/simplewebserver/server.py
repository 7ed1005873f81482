"""
=============================================================================
WEB SERVER
=============================================================================

Ties the listener to the worker: every accepted connection gets its own
thread running WebWorker.handle().

=============================================================================
THREAD PER CONNECTION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   main thread              SocketServer.start()                    │
    │                                 │ accept()                          │
    │        ┌────────────────────────┼────────────────────────┐          │
    │        ▼                        ▼                        ▼          │
    │   worker-a1b2c3d4          worker-e5f6a7b8          worker-...     │
    │   handle(conn)             handle(conn)             handle(conn)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Workers share nothing mutable: no locks, no pool, no cache. The only
shared resources are the filesystem (read only) and the log handlers.
There is no limit on concurrent connections beyond the listen backlog;
a client that sends nothing is cut off by the connection read timeout.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core.connection import Connection
from .core.socket_server import SocketServer
from .worker import WebWorker


logger = logging.getLogger(__name__)


class WebServer:
    """
    Single-request-per-connection HTTP file server.

    Usage:
        server = WebServer(ServerConfig(port=8080, root="./public"))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._worker = WebWorker(self.config)
        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (ip, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._running = True

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections. In-flight workers finish on their own."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("simplewebserver").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """Start a worker thread for a newly accepted connection."""
        thread = threading.Thread(
            target=self._worker.handle,
            args=(conn,),
            name=f"worker-{conn.id}",
            daemon=True,
        )
        thread.start()
