"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps an accepted client socket. A connection carries exactly one
request and one response, then it is closed.

=============================================================================
ONE READ, ONE WRITE
=============================================================================

There is no framing. The request is whatever the first recv() returns:

    Client sends 300 bytes   →  one recv(1024) returns 300 bytes   ✓
    Client sends 3000 bytes  →  one recv(1024) returns 1024 bytes  ✗ truncated

The response is written with a single sendall(), and closing the socket
marks the end of the body (no Content-Length is sent).

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► DISPATCHING ──► WRITING ──► CLOSED
               │
               └── read error ─────────────────────► CLOSED (no reply)

There is no keep-alive and no read timeout: a client that never sends
blocks the server.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
import uuid


logger = logging.getLogger(__name__)


# Upper bounds on reading leftover client input in close()
DRAIN_TIMEOUT = 0.5
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    """Connection lifecycle states."""
    NEW = "new"                  # Just accepted
    READING = "reading"          # Inside the single recv()
    DISPATCHING = "dispatching"  # Parsing and routing
    WRITING = "writing"          # Inside sendall()
    CLOSED = "closed"            # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Maximum bytes taken by the single read.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024

    def __post_init__(self):
        # Accepted sockets may inherit the listener's timeout
        self.socket.setblocking(True)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # I/O
    # =========================================================================

    def read(self) -> bytes:
        """
        Perform the one and only read on this connection.

        Returns:
            Up to buffer_size bytes (b"" if the client sent nothing).

        Raises:
            OSError: If the read fails. The caller abandons the connection.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)

        if len(data) >= self.buffer_size:
            logger.warning(
                f"[{self.id}] Read filled the {self.buffer_size}-byte buffer; "
                f"request may be truncated"
            )

        self.state = ConnectionState.DISPATCHING
        return data

    def send(self, data: bytes) -> None:
        """
        Write the whole response in one sendall().

        Raises:
            OSError: If the write fails. Not recoverable for this connection.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)

    # =========================================================================
    # CLEANUP
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR): client sees EOF, which ends the response body
        2. drain whatever the client still sends, for at most DRAIN_TIMEOUT
           seconds and DRAIN_LIMIT bytes in total
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def _drain(self) -> int:
        """Discard pending client input. Returns the number of bytes dropped."""
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0

        try:
            while drained < DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(1024)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # socket.timeout is an OSError

        return drained

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                data = conn.read()
                conn.send(response)
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
