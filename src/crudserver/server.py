"""
=============================================================================
CRUD SERVER
=============================================================================

Ties the pieces together: storage gateway, request parser, router,
response encoder and the sequential socket server.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                             │
    │        │                                                             │
    │        ▼                                                             │
    │   handle_connection(conn)                                           │
    │        │                                                             │
    │        ├── conn.read()         one recv()                           │
    │        │      └── OSError → log, close, no reply                     │
    │        │                                                             │
    │        ├── handle_request(raw)                                       │
    │        │      ├── RequestParser.parse()   bytes → HTTPRequest       │
    │        │      ├── Router.handle()         → UserHandler → Gateway   │
    │        │      └── access log line                                    │
    │        │                                                             │
    │        ├── conn.send(response.to_bytes())  one sendall()            │
    │        │      └── OSError → propagates, fatal for this conn only    │
    │        │                                                             │
    │        └── conn.close()                                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
STARTUP
=============================================================================

run() creates the users table BEFORE binding the socket. If the store is
unreachable the error propagates out of run() and nothing is served.

=============================================================================
"""

import logging
import time
from typing import Optional, Tuple

from .config import ServerConfig
from .core.socket_server import SocketServer
from .core.connection import Connection
from .errors import CRUDServerError
from .handlers.users import UserHandler
from .http.request import RequestParser
from .http.response import HTTPResponse
from .http.router import Router
from .storage.gateway import StorageGateway
from .access_log import log_request


logger = logging.getLogger(__name__)


class CRUDServer:
    """
    User CRUD service over raw TCP.

    =========================================================================
    USAGE
    =========================================================================

        config = ServerConfig(database_url="postgresql://app@localhost/app")
        server = CRUDServer(config)
        server.run()  # blocks

    Without a socket (tests, embedding):

        response = server.handle_request(b"GET /users/1 HTTP/1.1\\r\\n\\r\\n")

    =========================================================================
    """

    def __init__(self, config: ServerConfig, gateway: Optional[StorageGateway] = None):
        """
        Args:
            config: Server configuration. Validated immediately.
            gateway: Storage gateway to use. Built from config.database_url
                     when omitted.
        """
        self.config = config
        self.config.validate()  # Fail-fast on invalid config

        self._gateway = gateway or StorageGateway(config.database_url)
        self._parser = RequestParser()

        self._router = Router()
        UserHandler(self._gateway).register(self._router)

        self._socket_server = SocketServer(self.config)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def gateway(self) -> StorageGateway:
        return self._gateway

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Initialize the schema, then serve until shutdown() or a signal.

        Raises:
            StorageUnavailable / StorageError: Schema setup failed. Nothing
                                               was bound.
            OSError: The listen address could not be bound.
        """
        self._setup_logging()

        try:
            self._gateway.initialize_schema()
        except CRUDServerError as e:
            logger.error(f"Error initializing database schema: {e}")
            raise

        self._print_startup_banner()

        try:
            self._socket_server.start(self.handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections (the current one is finished first)."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is bound."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("crudserver").setLevel(level)

    def _print_startup_banner(self):
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print("║  crudserver running                                          ║")
        print(f"║  http://{self.config.host}:{self.config.port}")
        print(f"║  database: {self.config.redacted_database_url}")
        print("║  Press Ctrl+C to stop                                        ║")
        print("╚══════════════════════════════════════════════════════════════╝")
        self._router.print_routes()

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_request(
        self,
        raw: bytes,
        client_address: Optional[Tuple[str, int]] = None,
        connection_id: str = "-",
    ) -> HTTPResponse:
        """
        Parse, route and access-log one request. No socket involved.

        Args:
            raw: Bytes as read from the client.
            client_address: Peer address, for logging.
            connection_id: Id of the carrying connection, for logging.

        Returns:
            The response to write back.
        """
        started_at = time.time()
        request = self._parser.parse(raw, client_address)
        response = self._router.handle(request)

        log_request(connection_id, request, response, started_at)
        return response

    def handle_connection(self, conn: Connection):
        """
        Service one accepted connection: read, dispatch, write, close.

        Called by SocketServer for each connection, one at a time.

        Raises:
            OSError: If writing the response fails.
        """
        with conn:
            try:
                raw = conn.read()
            except OSError as e:
                logger.error(f"[{conn.id}] Unable to read stream: {e}")
                return

            response = self.handle_request(raw, conn.address, conn.id)
            conn.send(response.to_bytes())


def create_app(config: Optional[ServerConfig] = None) -> CRUDServer:
    """
    Build a server from config, or from the environment when omitted.

    Example:
        app = create_app()
        app.run()
    """
    return CRUDServer(config or ServerConfig.from_env())
