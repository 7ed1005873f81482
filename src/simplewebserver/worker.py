"""
=============================================================================
WEB WORKER
=============================================================================

Handles exactly one client connection from first byte to close.

=============================================================================
ONE CONNECTION, START TO FINISH
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   RequestReader.read_request()      "GET /logo.png HTTP/1.1"       │
    │        │                                                             │
    │        ▼                                                             │
    │   ResourceResolver.resolve()        200 logo.png | 404 404page.html │
    │        │                                                             │
    │        ▼                                                             │
    │   ResponseWriter.write_header()     header block (+ 404 body)       │
    │        │                                                             │
    │        ▼                                                             │
    │   ContentRenderer.render()          200 body only                   │
    │        │                                                             │
    │        ▼                                                             │
    │   RequestReader.drain()             consume remaining header lines  │
    │        │                                                             │
    │        ▼                                                             │
    │   flush + close                                                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURES STAY INSIDE THE CONNECTION
=============================================================================

    MalformedRequest        logged, nothing written, drained, closed
    timeout on first line   logged, closed
    timeout while writing   logged, response truncated, drained, closed
    file open error         logged, nothing written, drained, closed
    body render error       logged, response truncated, drained, closed
    header write error      logged by the writer, body skipped
    anything else           logged with traceback, closed

Nothing is retried and nothing escapes the worker thread: one bad client
never affects another.

=============================================================================
"""

import socket
import logging
from dataclasses import replace
from typing import Optional

from .config import ServerConfig
from .core.connection import Connection, ConnectionState
from .handlers.renderer import ContentRenderer
from .http.request import MalformedRequest, Request, RequestReader
from .http.resolver import ResourceResolver
from .http.response import ResponseWriter


logger = logging.getLogger(__name__)


class WebWorker:
    """
    Serves one request per connection.

    A single WebWorker is shared by all connection threads. It holds
    configuration only; every piece of per-request state lives in local
    variables of handle().

    Usage:
        worker = WebWorker(ServerConfig(root="./public"))
        threading.Thread(target=worker.handle, args=(conn,)).start()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()

        self.renderer = ContentRenderer(
            templated_extension=self.config.templated_extension,
            date_token=self.config.date_token,
            server_token=self.config.server_token,
            server_label=self.config.server_label,
            encoding=self.config.encoding,
        )
        self.resolver = ResourceResolver(
            root=self.config.root,
            fallback_document=self.config.not_found_document,
            mime_type=self.config.mime_type,
        )
        self.writer = ResponseWriter(
            renderer=self.renderer,
            server_name=self.config.server_name,
            fallback_path=self.resolver.fallback_path,
        )

    def handle(self, conn: Connection) -> Optional[Request]:
        """
        Handle one connection and close it.

        Args:
            conn: The client connection (closed on return).

        Returns:
            The request with its header lines attached, or None if no
            valid request line was received.
        """
        logger.debug(f"[{conn.id}] Handling connection...")

        with conn:
            try:
                request = self._process(conn)
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")
                request = None

        logger.debug(f"[{conn.id}] Done handling connection.")
        return request

    def _process(self, conn: Connection) -> Optional[Request]:
        reader = RequestReader(conn.reader, self.config.default_document)
        request = None
        status = None

        # ─────────────────────────────────────────────────────────────────
        # READ, RESOLVE, RESPOND
        # ─────────────────────────────────────────────────────────────────
        try:
            conn.state = ConnectionState.READING
            request = reader.read_request()

            resource = self.resolver.resolve(request.path)
            status = resource.status

            conn.state = ConnectionState.WRITING
            written = self.writer.write_header(conn.writer, resource.mime_type, resource.status)

            # The writer already sent the fallback body for a 404
            if written and resource.exists:
                self.renderer.render(conn.writer, resource.path)

        except MalformedRequest as e:
            logger.warning(f"[{conn.id}] {e}")

        except socket.timeout as e:
            if conn.state != ConnectionState.READING:
                logger.error(f"[{conn.id}] Timed out writing response: {e}")
            else:
                # The client never sent a line; draining would only time out again
                logger.warning(f"[{conn.id}] Timed out waiting for request line")
                return None

        except (OSError, UnicodeError) as e:
            logger.error(f"[{conn.id}] Error serving request: {e}")

        # ─────────────────────────────────────────────────────────────────
        # DRAIN THE REST OF THE REQUEST, THEN FLUSH
        # ─────────────────────────────────────────────────────────────────
        conn.state = ConnectionState.DRAINING
        header_lines = reader.drain()
        conn.flush()

        if request is None:
            return None

        request = replace(request, header_lines=header_lines)
        logger.info(
            f'[{conn.id}] "{request.method} {request.target} {request.version}" '
            f"{int(status) if status else '-'}"
        )
        return request
