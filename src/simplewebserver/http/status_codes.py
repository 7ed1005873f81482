"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server knows about.

Only 200 and 404 ever reach the wire. 400 exists so a malformed request
can name the status it *would* map to, even though no 400 response is
written for it (the connection is simply closed).

The status line is written WITHOUT a reason phrase:

    HTTP/1.1 200
    HTTP/1.1 404

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes.

    IntEnum, so members compare and format as plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> f"{HTTPStatus.NOT_FOUND:d}"
        '404'
    """

    OK = 200                # File found and served
    BAD_REQUEST = 400       # First line was not "GET <path>"
    NOT_FOUND = 404         # File missing, fallback document served

    @property
    def code(self) -> str:
        """The status as written on the status line, e.g. "404"."""
        return str(int(self))
