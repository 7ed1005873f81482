"""
=============================================================================
HTTP RESPONSE WRITER
=============================================================================

Writes the response header block, and for a 404 the fallback body too.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   HTTP/1.1 200\n                      ◄── no reason phrase          │
    │   Date: Mon Oct 19 12:58:03 2026\n    ◄── GMT, locale format (%c)   │
    │   Server: Julio's very own server\n                                 │
    │   Connection: close\n                                               │
    │   Content-Type: text/html\n                                         │
    │   \n                                  ◄── end of header block       │
    │   <body>                                                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Lines end in a bare LF and the Date header uses the locale's default
date-time representation rather than the RFC 7231 IMF-fixdate. Both are
how this server has always answered, so they are kept byte for byte.
There is no Content-Length: the body ends when the connection closes.

=============================================================================
THE 404 SPECIAL CASE
=============================================================================

For a 404 the writer renders the fallback document itself, right after
the header block. Callers must NOT render again for a 404:

    status 200:   worker ─► write_header() ─► renderer.render(file)
    status 404:   worker ─► write_header() ──┬─► header block
                                             └─► renderer.render(404page)

=============================================================================
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Callable, List, Union

from .status_codes import HTTPStatus
from ..handlers.renderer import ContentRenderer


logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time in GMT."""
    return datetime.now(timezone.utc)


def format_header_date(dt: datetime) -> str:
    """
    Format a datetime for the Date header.

    Uses the locale's default date and time representation (%c) after
    converting to GMT. In the C locale that reads:

        Mon Oct 19 12:58:03 2026

    Args:
        dt: An aware datetime (naive values are taken as GMT).
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%c")


class ResponseWriter:
    """
    Writes response headers to a binary output stream.

    Args:
        renderer: Renders the fallback document for 404 responses.
        server_name: Value of the Server header.
        fallback_path: The 404 document.
        clock: Returns the current time for the Date header.
    """

    def __init__(
        self,
        renderer: ContentRenderer,
        server_name: str = "Julio's very own server",
        fallback_path: Union[str, Path] = "404page.html",
        clock: Callable[[], datetime] = utc_now,
    ):
        self.renderer = renderer
        self.server_name = server_name
        self.fallback_path = Path(fallback_path)
        self.clock = clock

    def header_lines(self, mime_type: str, status: HTTPStatus) -> List[str]:
        """The header block as text lines, without line endings."""
        return [
            f"HTTP/1.1 {HTTPStatus(status).code}",
            f"Date: {format_header_date(self.clock())}",
            f"Server: {self.server_name}",
            "Connection: close",
            f"Content-Type: {mime_type}",
            "",
        ]

    def write_header(self, stream: BinaryIO, mime_type: str, status: HTTPStatus) -> bool:
        """
        Write the header block, plus the fallback body for a 404.

        Never raises for I/O problems: a failed header write is logged
        and reported through the return value, a failed fallback render
        is logged and the response is left without a body.

        Args:
            stream: Write side of the client connection.
            mime_type: Value of the Content-Type header.
            status: HTTPStatus.OK or HTTPStatus.NOT_FOUND.

        Returns:
            True if the header block was written, False otherwise.
        """
        try:
            for line in self.header_lines(mime_type, status):
                stream.write(line.encode("utf-8") + b"\n")
        except OSError as e:
            logger.error(f"Error writing response header: {e}")
            return False

        if status == HTTPStatus.NOT_FOUND:
            try:
                self.renderer.render(stream, self.fallback_path)
            except (OSError, UnicodeError) as e:
                logger.error(f"Error writing fallback document {self.fallback_path}: {e}")

        return True
