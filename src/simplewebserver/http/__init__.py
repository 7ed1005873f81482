"""
=============================================================================
HTTP PROTOCOL MODULE
=============================================================================

    request.py       Request line parsing and header draining
    resolver.py      Request path → file under the document root
    response.py      Status line + header block writer
    status_codes.py  The status codes this server uses

=============================================================================
"""

from .request import Request, RequestReader, MalformedRequest, parse_request_line
from .resolver import ResolvedResource, ResourceResolver
from .response import ResponseWriter, format_header_date
from .status_codes import HTTPStatus

__all__ = [
    # Request reading
    "Request",
    "RequestReader",
    "MalformedRequest",
    "parse_request_line",

    # Resolution
    "ResolvedResource",
    "ResourceResolver",

    # Response writing
    "ResponseWriter",
    "format_header_date",

    # Status codes
    "HTTPStatus",
]
