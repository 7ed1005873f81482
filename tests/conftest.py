"""
pytest configuration and fixtures.
"""

import io
import socket
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplewebserver import WebServer, ServerConfig
from simplewebserver.core.connection import ConnectionState


TEST_HTML = (
    "<html>\n"
    "<body>\n"
    "<p>Built on <cs371date> by <cs371server></p>\n"
    "</body>\n"
    "</html>\n"
)

NOT_FOUND_HTML = (
    "<html>\n"
    "<body><h1>404</h1><p><cs371server> could not find that (<cs371date>)</p></body>\n"
    "</html>\n"
)

# Not valid UTF-8 on purpose: must go out byte for byte
LOGO_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x00<cs371date>"

FIXED_NOW = datetime(2026, 10, 19, 12, 30, 45)


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """Document root with a template page, a fallback page and a binary file."""
    root = tmp_path / "www"
    root.mkdir()
    (root / "test.html").write_text(TEST_HTML, encoding="utf-8")
    (root / "404page.html").write_text(NOT_FOUND_HTML, encoding="utf-8")
    (root / "logo.png").write_bytes(LOGO_PNG)
    (root / "notes.txt").write_text("plain <cs371server> text\n", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "page.html").write_text("<cs371server>\n", encoding="utf-8")
    return root


@pytest.fixture
def config(docroot: Path) -> ServerConfig:
    """Test server configuration serving the docroot fixture."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        root=str(docroot),
        timeout=2.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class RecordingStream(io.BytesIO):
    """BytesIO that counts flush() calls."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


@dataclass
class FakeConnection:
    """
    In-memory stand-in for core.connection.Connection.

    close() only marks the connection closed so the written bytes can
    still be inspected afterwards.
    """

    request: bytes = b""
    id: str = "test0001"
    state: ConnectionState = ConnectionState.NEW
    reader: io.BytesIO = field(init=False)
    writer: RecordingStream = field(init=False)

    def __post_init__(self):
        self.reader = io.BytesIO(self.request)
        self.writer = RecordingStream()

    @property
    def output(self) -> bytes:
        return self.writer.getvalue()

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    def flush(self) -> bool:
        self.writer.flush()
        return True

    def close(self):
        self.state = ConnectionState.CLOSED

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def split_response(raw: bytes):
    """Split raw response bytes into (header lines, body)."""
    head, sep, body = raw.partition(b"\n\n")
    assert sep, f"no header terminator in {raw!r}"
    return head.decode("utf-8").split("\n"), body


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: WebServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send raw request bytes and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create a running test server over the docroot fixture."""
    test_srv = TestServer(WebServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def make_connection():
    """Factory for in-memory connections: make_connection(b"GET / HTTP/1.1\\r\\n\\r\\n")."""
    return FakeConnection


@pytest.fixture
def parse_response():
    """The split_response() helper as a fixture."""
    return split_response


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed local time for date token and Date header tests."""
    return FIXED_NOW
