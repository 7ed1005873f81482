"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket as a duplex byte stream.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does not preserve message boundaries. The request line might arrive
in one recv() or in five:

    Client sends:   "GET /test.html HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive:
        recv() → "GET /te"
        recv() → "st.html HTTP/1.1\r\nHo"
        recv() → "st: x\r\n\r\n"

Rather than buffering by hand, the socket is wrapped in buffered file
objects (socket.makefile). readline() then blocks until a whole line is
in, or the client closes, or the socket timeout fires.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      Connection                                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   reader  = socket.makefile("rb")   readline() → b"GET / ...\r\n"  │
    │   writer  = socket.makefile("wb")   write() + flush()              │
    │                                                                      │
    │   timeout applies to every blocking read (None = wait forever)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► WRITING ──► DRAINING ──► CLOSING ──► CLOSED
     │         │            │                       ▲
     └─────────┴────────────┴───────────────────────┘
                 (any failure goes straight to close)

One request per connection: there is no keep-alive state.

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"              # Just accepted, nothing read yet
    READING = "reading"      # Waiting for / parsing the request line
    WRITING = "writing"      # Sending header and body
    DRAINING = "draining"    # Consuming the rest of the request header
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short unique id used to prefix log lines.
        state: Current lifecycle state.
        created_at: Timestamp when the connection was accepted.
        timeout: Read timeout in seconds, None to block indefinitely.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = 30.0

    reader: BinaryIO = field(init=False, repr=False)
    writer: BinaryIO = field(init=False, repr=False)

    def __post_init__(self):
        # settimeout(None) puts the socket in blocking mode
        self.socket.settimeout(self.timeout)
        self.reader = self.socket.makefile("rb")
        self.writer = self.socket.makefile("wb")

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    def flush(self) -> bool:
        """
        Push buffered output to the client.

        Returns:
            True on success, False if the client is gone.
        """
        try:
            self.writer.flush()
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Flush failed: {e}")
            return False

    def close(self):
        """
        Close the connection.

        1. Flush anything still buffered.
        2. shutdown(SHUT_WR): send FIN so the client sees end of body.
        3. Close both file objects and the socket.

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        self.flush()

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Client already gone

        for stream in (self.writer, self.reader):
            try:
                stream.close()
            except OSError:
                pass  # Unflushable writer on a dead socket

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                ... handle the request ...
            # Connection closed here, whatever happened
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
