"""
=============================================================================
CONTENT RENDERER
=============================================================================

Writes a file's content to the client as the response body.

=============================================================================
TWO DELIVERY MODES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   *.html  ──► TEMPLATED                                             │
    │              read as text, line by line                             │
    │              <cs371date>   → 20261019   (today, yyyyMMdd)           │
    │              <cs371server> → Julio's Server                         │
    │              no flush (the worker flushes once at the end)          │
    │                                                                      │
    │   other   ──► RAW                                                   │
    │              read the whole file as bytes                           │
    │              write verbatim, flush                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only those two tokens are recognized. Anything else that looks like a tag
is passed through untouched.

Line endings of templated files are written back exactly as they are on
disk (the file is opened with newline=""), so the body equals the file's
text with only the tokens replaced. Classic versions of this server
dropped every line ending from templated pages; this one no longer does.

Templates are decoded with errors="surrogateescape" and encoded back the
same way. Bytes that are not valid in the configured encoding (a Latin-1
page read as UTF-8) pass through unchanged instead of failing the
response.

=============================================================================
ERRORS
=============================================================================

Nothing is caught here. If the file vanished between resolve and render,
or the client hung up mid-body, the OSError goes to the caller, which
decides whether it is worth logging and aborts the response.

=============================================================================
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Callable, Union


logger = logging.getLogger(__name__)

# Round-trips bytes the template encoding cannot decode
UNDECODABLE_BYTES = "surrogateescape"


class ContentRenderer:
    """
    Renders files onto a binary output stream.

    Usage:
        renderer = ContentRenderer(server_label="Julio's Server")
        renderer.render(conn.writer, Path("test.html"))
    """

    def __init__(
        self,
        templated_extension: str = ".html",
        date_token: str = "<cs371date>",
        server_token: str = "<cs371server>",
        server_label: str = "Julio's Server",
        encoding: str = "utf-8",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.templated_extension = templated_extension
        self.date_token = date_token
        self.server_token = server_token
        self.server_label = server_label
        self.encoding = encoding
        self.clock = clock

    def is_templated(self, path: Union[str, Path]) -> bool:
        """True if the file gets token substitution."""
        return str(path).endswith(self.templated_extension)

    def date_stamp(self) -> str:
        """Today's local date as an 8-digit yyyyMMdd string."""
        return self.clock().strftime("%Y%m%d")

    def substitute(self, line: str, date_stamp: str = None) -> str:
        """Replace every date and server token in one line."""
        if date_stamp is None:
            date_stamp = self.date_stamp()
        return (line
            .replace(self.date_token, date_stamp)
            .replace(self.server_token, self.server_label))

    def render(self, stream: BinaryIO, path: Union[str, Path]) -> None:
        """
        Write the body for `path` to `stream`.

        Raises:
            OSError: The file could not be read or the stream written.
        """
        if self.is_templated(path):
            self._render_template(stream, path)
        else:
            self._render_raw(stream, path)

    def _render_template(self, stream: BinaryIO, path: Union[str, Path]) -> None:
        # One date for the whole document, even across midnight
        stamp = self.date_stamp()
        with open(path, "r", encoding=self.encoding, errors=UNDECODABLE_BYTES, newline="") as f:
            for line in f:
                stream.write(self.substitute(line, stamp).encode(self.encoding, UNDECODABLE_BYTES))

    def _render_raw(self, stream: BinaryIO, path: Union[str, Path]) -> None:
        content = Path(path).read_bytes()
        logger.debug(f"Send: {path}({len(content)} bytes)")
        stream.write(content)
        stream.flush()
        logger.debug("Send: Done.")
