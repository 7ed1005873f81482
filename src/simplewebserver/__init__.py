"""
=============================================================================
SIMPLEWEBSERVER - A Minimal One-Request-Per-Connection HTTP/1.1 File Server
=============================================================================

For each TCP connection: read one `GET <path>` line, map the path to a
file, write a header block and the file, close.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    simplewebserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m simplewebserver)
    ├── config.py            # ServerConfig dataclass
    ├── server.py            # WebServer: listener + thread per connection
    ├── worker.py            # WebWorker: one connection end to end
    ├── core/
    │   ├── socket_server.py # TCP accept loop
    │   └── connection.py    # Socket as buffered duplex stream
    ├── http/
    │   ├── request.py       # Request line parsing, header draining
    │   ├── resolver.py      # Path → file, 200/404
    │   ├── response.py      # Header block writer
    │   └── status_codes.py  # HTTPStatus enum
    └── handlers/
        └── renderer.py      # Raw and templated file bodies

=============================================================================
QUICK START
=============================================================================

    from simplewebserver import WebServer, ServerConfig

    WebServer(ServerConfig(port=8080, root="./public")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import WebServer
from .worker import WebWorker

__all__ = ["WebServer", "WebWorker", "ServerConfig", "__version__"]
