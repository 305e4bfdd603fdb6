"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Dict, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from crudserver import CRUDServer, ServerConfig, User
from crudserver.errors import CRUDServerError, NotFound, StorageError
from crudserver.storage import StorageGateway


@pytest.fixture
def sample_post_request() -> bytes:
    """POST /users with a JSON body, as curl would send it."""
    body = b'{"name":"Alice","email":"a@x.com"}'
    return (
        b"POST /users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        b"Content-Length: %d\r\n"
        b"\r\n"
    ) % len(body) + body


@pytest.fixture
def sample_get_request() -> bytes:
    """GET /users/42."""
    return (
        b"GET /users/42 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Accept: application/json\r\n"
        b"\r\n"
    )


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """A throwaway SQLite database file per test."""
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def gateway(database_url: str) -> Generator[StorageGateway, None, None]:
    """Gateway on a fresh database with the schema already created."""
    gw = StorageGateway(database_url)
    gw.initialize_schema()
    yield gw
    gw.dispose()


class FakeGateway:
    """
    In-memory stand-in for StorageGateway.

    Set `fail_with` to make every operation raise that error.
    """

    def __init__(self, ids=None):
        self.rows: Dict[int, User] = {}
        self._ids = iter(ids or range(1, 1001))
        self.fail_with: Optional[CRUDServerError] = None

    def initialize_schema(self) -> None:
        if self.fail_with:
            raise self.fail_with

    def create_user(self, name: str, email: str) -> int:
        if self.fail_with:
            raise self.fail_with
        user_id = next(self._ids)
        if user_id in self.rows:
            raise StorageError(f"Insert failed for id {user_id}")
        self.rows[user_id] = User(id=user_id, name=name, email=email)
        return user_id

    def get_user_by_id(self, user_id: int) -> User:
        if self.fail_with:
            raise self.fail_with
        if user_id not in self.rows:
            raise NotFound()
        return self.rows[user_id]


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read the reply until EOF."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(data)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class ServerThread:
    """Runs a CRUDServer in a background thread."""

    def __init__(self, server: CRUDServer):
        self.server = server
        self.port = server.config.port
        self.error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    def _run(self):
        try:
            self.server.run()
        except BaseException as e:
            self.error = e

    def start(self):
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError(f"Server failed to start: {self.error!r}")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_raw(self.port, data)


@pytest.fixture
def config(database_url: str, free_port: int) -> ServerConfig:
    """Test server configuration on a free port."""
    return ServerConfig(
        database_url=database_url,
        host="127.0.0.1",
        port=free_port,
        log_level="WARNING",
    )


@pytest.fixture
def running_server(config: ServerConfig) -> Generator[ServerThread, None, None]:
    """A live server backed by a SQLite file."""
    thread = ServerThread(CRUDServer(config))
    thread.start()

    yield thread

    thread.stop()
