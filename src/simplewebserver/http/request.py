"""
=============================================================================
HTTP REQUEST READER
=============================================================================

Reads the request line off a client stream and turns it into a Request.

=============================================================================
WHAT WE ACTUALLY READ
=============================================================================

A browser sends a full HTTP request:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /index.html HTTP/1.1\r\n        ◄── request line (PARSED)     │
    │   Host: localhost:8080\r\n             ◄─┐                          │
    │   User-Agent: curl/8.0\r\n               ├─ header lines (DRAINED)  │
    │   Accept: */*\r\n                      ◄─┘                          │
    │   \r\n                                 ◄── end of header block      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only the first two tokens of the request line matter:

    GET  /index.html  HTTP/1.1
    ─┬─  ─────┬─────  ────┬───
     │        │           └── version (kept for logging only)
     │        └── target: leading "/" stripped → "index.html"
     └── method: must be GET (any case)

The header lines are read AFTER the response has been written, only so
the request is fully consumed before the socket is closed. Closing a
socket with unread data in its receive buffer makes the kernel send a
RST, which can destroy the response before the client has read it.

=============================================================================
PATH NORMALIZATION
=============================================================================

    GET /              →  "test.html"      (default document)
    GET /logo.png      →  "logo.png"
    GET /docs/a.html   →  "docs/a.html"
    GET //x            →  "/x"             (only ONE slash is stripped)

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple

from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)

# HTTP/1.1 header bytes are ISO-8859-1; decoding can never fail
REQUEST_ENCODING = "iso-8859-1"


class MalformedRequest(ValueError):
    """
    Raised when the first line of a request is not `GET <path>`.

    Carries the status the request would map to. No response is written
    for it: the worker logs it and closes the connection.
    """

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line
        self.status_code = HTTPStatus.BAD_REQUEST


@dataclass(frozen=True)
class Request:
    """
    A parsed request.

    Frozen: once the request line is parsed nothing changes it. The
    header lines are attached with dataclasses.replace() after they have
    been drained from the stream.

    Attributes:
        method:       Always "GET" (normalized to upper case).
        path:         Relative file path, leading slash stripped.
        target:       The request target exactly as the client sent it.
        version:      Third token of the request line, "" if missing.
        header_lines: Raw header lines in the order they arrived.
    """

    method: str
    path: str
    target: str = ""
    version: str = ""
    header_lines: Tuple[str, ...] = ()


def parse_request_line(line: str, default_document: str = "test.html") -> Request:
    """
    Parse a request line into a Request.

    Args:
        line: The first line of the request, with or without line ending.
        default_document: Path used when the request targets "/".

    Returns:
        The parsed request.

    Raises:
        MalformedRequest: If the method is not GET or there is no target.

    Example:
        >>> parse_request_line("GET / HTTP/1.1\\r\\n").path
        'test.html'
    """
    tokens = line.split()

    if len(tokens) < 2 or tokens[0].upper() != "GET":
        raise MalformedRequest(f"Malformed request line: {line.strip()!r}", line)

    target = tokens[1]
    path = target[1:] if target.startswith("/") else target
    if not path:
        path = default_document

    return Request(
        method="GET",
        path=path,
        target=target,
        version=tokens[2] if len(tokens) > 2 else "",
    )


class RequestReader:
    """
    Reads one request from the read side of a client connection.

    The stream is any binary file object with readline(): the buffered
    reader of socket.makefile("rb") in production, io.BytesIO in tests.

    Usage:
        reader = RequestReader(conn.reader)
        request = reader.read_request()   # blocks for the request line
        ... write the response ...
        lines = reader.drain()            # consume the header block
    """

    def __init__(self, stream: BinaryIO, default_document: str = "test.html"):
        self.stream = stream
        self.default_document = default_document

    def _readline(self) -> Optional[str]:
        """Read one line without its line ending. None at end of stream."""
        raw = self.stream.readline()
        if not raw:
            return None
        return raw.decode(REQUEST_ENCODING).rstrip("\r\n")

    def read_request(self) -> Request:
        """
        Block until the request line arrives and parse it.

        Blocking is bounded only by the stream's own timeout; a socket
        timeout surfaces as TimeoutError (socket.timeout).

        Raises:
            MalformedRequest: Stream ended before a line, or the line is
                              not `GET <path>`.
        """
        line = self._readline()
        if line is None:
            raise MalformedRequest("Connection closed before request line")
        return parse_request_line(line, self.default_document)

    def drain(self) -> Tuple[str, ...]:
        """
        Consume the remaining header lines.

        Stops at the empty line ending the header block, at end of stream,
        or at the first read error. A read error ends the drain; it is
        logged, never raised.

        Returns:
            The header lines read, in order.
        """
        lines = []
        while True:
            try:
                line = self._readline()
            except OSError as e:
                logger.debug(f"Request error: {e}")
                break

            if line is None:
                break

            logger.debug(f"Request line: ({line})")
            if not line:
                break
            lines.append(line)

        return tuple(lines)
