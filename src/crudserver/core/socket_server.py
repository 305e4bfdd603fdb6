"""
=============================================================================
SEQUENTIAL TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    1. socket()    Create the listening socket
    2. bind()      Reserve host:port
    3. listen()    Start queueing connections (up to `backlog`)
    4. accept()    Take one connection off the queue
    5. handle      Service it COMPLETELY (read, route, store, write, close)
    6. goto 4

                    ┌───────────────────────┐
                    │   Listening Socket    │
                    └───────────┬───────────┘
                                │ accept()
                                ▼
                    ┌───────────────────────┐
                    │ connection_handler()  │  ← one at a time
                    └───────────┬───────────┘
                                │ returns
                                ▼
                           next accept()

=============================================================================
CONCURRENCY
=============================================================================

None. While one client is serviced, everyone else waits in the backlog,
including behind a slow database round-trip. The handler is a plain
callable, so a thread pool or event loop can later be put in front of
it without touching parsing or routing.

A failure inside the handler is logged and the loop moves on to the
next connection; it never stops the server.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ConnectionHandler = Callable[[Connection], None]


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                data = conn.read()
                conn.send(b"...")

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, buffer_size).

        The socket is created lazily in start().
        """
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready_event = threading.Event()
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) actually bound, once started."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow immediate restart while old connections sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # accept() wakes up every second to notice shutdown()
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """
        Turn SIGTERM / SIGINT into a clean shutdown.

        Signal handlers can only be installed from the main thread; when
        the server runs elsewhere (tests) this is skipped.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: ConnectionHandler):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until shutdown() is called.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: ConnectionHandler):
        """Accept and fully service one connection at a time."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                # Fatal for this connection only
                logger.exception(f"[{conn.id}] Connection failed: {e}")
                conn.close()

    def shutdown(self):
        """
        Stop the accept loop. Idempotent, callable from any thread.

        The loop notices within one accept timeout (1 s).
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
