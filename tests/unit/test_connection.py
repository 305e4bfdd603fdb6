"""
Unit tests for Connection and the per-connection flow in CRUDServer.
"""

import logging
import socket
import time
from typing import List, Optional

import pytest

from crudserver import CRUDServer, ServerConfig
from crudserver.core.connection import DRAIN_LIMIT, DRAIN_TIMEOUT, Connection, ConnectionState

from conftest import FakeGateway


class FakeSocket:
    """Socket double that records writes and can fail on demand."""

    def __init__(self, incoming: bytes = b"", recv_error: Optional[OSError] = None,
                 send_error: Optional[OSError] = None):
        self.incoming = incoming
        self.recv_error = recv_error
        self.send_error = send_error
        self.sent: List[bytes] = []
        self.recv_calls = 0
        self.closed = False

    def setblocking(self, flag):
        pass

    def settimeout(self, value):
        pass

    def recv(self, size: int) -> bytes:
        self.recv_calls += 1
        if self.recv_calls == 1:
            if self.recv_error:
                raise self.recv_error
            return self.incoming[:size]
        return b""

    def sendall(self, data: bytes):
        if self.send_error:
            raise self.send_error
        self.sent.append(data)

    def shutdown(self, how):
        pass

    def close(self):
        self.closed = True


@pytest.fixture
def server(fake_gateway: FakeGateway) -> CRUDServer:
    return CRUDServer(ServerConfig(database_url="sqlite:///unused.db"), gateway=fake_gateway)


class TestConnection:

    def test_single_read_is_bounded_by_buffer(self):
        """Only one recv: anything past buffer_size is lost."""
        left, right = socket.socketpair()
        try:
            conn = Connection(socket=left, address=("127.0.0.1", 1), buffer_size=16)
            right.sendall(b"A" * 32)

            data = conn.read()

            assert data == b"A" * 16
            assert conn.state == ConnectionState.DISPATCHING
        finally:
            left.close()
            right.close()

    def test_send_and_close(self):
        left, right = socket.socketpair()
        try:
            conn = Connection(socket=left, address=("127.0.0.1", 1))
            with conn:
                conn.send(b"hello")
                assert conn.state == ConnectionState.WRITING

            assert conn.state == ConnectionState.CLOSED
            assert right.recv(1024) == b"hello"
            assert right.recv(1024) == b""  # EOF ends the response
        finally:
            right.close()

    def test_close_is_idempotent(self):
        fake = FakeSocket()
        conn = Connection(socket=fake, address=("127.0.0.1", 1))

        conn.close()
        conn.close()

        assert fake.closed
        assert conn.state == ConnectionState.CLOSED

    def test_client_ip(self):
        conn = Connection(socket=FakeSocket(), address=("10.0.0.5", 4242))
        assert conn.client_ip == "10.0.0.5"



class EndlessSocket(FakeSocket):
    """A client that never stops sending."""

    def __init__(self, chunk: bytes):
        super().__init__()
        self.chunk = chunk

    def recv(self, size: int) -> bytes:
        self.recv_calls += 1
        return self.chunk[:size]


class TestDrainLimits:

    def test_drain_stops_at_byte_limit(self):
        fake = EndlessSocket(b"x" * 1024)
        conn = Connection(socket=fake, address=("127.0.0.1", 1))

        conn.close()

        assert fake.closed
        assert fake.recv_calls == DRAIN_LIMIT // 1024

    def test_drain_stops_at_deadline(self):
        """A trickle of single bytes cannot hold close() open."""
        fake = EndlessSocket(b"x")
        conn = Connection(socket=fake, address=("127.0.0.1", 1))

        started = time.monotonic()
        conn.close()

        assert fake.closed
        assert time.monotonic() - started < DRAIN_TIMEOUT + 1.0
        assert fake.recv_calls <= DRAIN_LIMIT

class TestHandleConnection:

    def test_full_cycle(self, server: CRUDServer, sample_post_request: bytes, fake_gateway):
        fake = FakeSocket(incoming=sample_post_request)
        conn = Connection(socket=fake, address=("127.0.0.1", 5000))

        server.handle_connection(conn)

        assert fake.sent == [
            b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"
            b'{"id":1,"status":"created"}'
        ]
        assert fake.closed
        assert fake_gateway.rows[1].name == "Alice"

    def test_read_error_abandons_without_reply(self, server: CRUDServer):
        fake = FakeSocket(recv_error=ConnectionResetError("reset by peer"))
        conn = Connection(socket=fake, address=("127.0.0.1", 5000))

        server.handle_connection(conn)

        assert fake.sent == []
        assert fake.closed

    def test_write_error_propagates(self, server: CRUDServer, sample_get_request: bytes):
        fake = FakeSocket(incoming=sample_get_request, send_error=BrokenPipeError("gone"))
        conn = Connection(socket=fake, address=("127.0.0.1", 5000))

        with pytest.raises(OSError):
            server.handle_connection(conn)

        assert fake.closed

    def test_empty_read_gets_404(self, server: CRUDServer):
        fake = FakeSocket(incoming=b"")
        server.handle_connection(Connection(socket=fake, address=("127.0.0.1", 5000)))

        assert fake.sent == [b"HTTP/1.1 404 NOT FOUND\r\n\r\n404 not found"]

    def test_dispatches_through_handle_request(self, server: CRUDServer, monkeypatch):
        """The live path and the socket-free path are the same code."""
        calls = []
        original = server.handle_request

        def recording(raw, client_address=None, connection_id="-"):
            calls.append((raw, client_address, connection_id))
            return original(raw, client_address, connection_id)

        monkeypatch.setattr(server, "handle_request", recording)

        fake = FakeSocket(incoming=b"GET /users/abc HTTP/1.1\r\n\r\n")
        conn = Connection(socket=fake, address=("127.0.0.1", 5000))
        server.handle_connection(conn)

        assert calls == [(b"GET /users/abc HTTP/1.1\r\n\r\n", ("127.0.0.1", 5000), conn.id)]
        assert fake.sent == [b"HTTP/1.1 404 NOT FOUND\r\n\r\nUser not found"]


class TestHandleRequest:

    def test_get_unknown_path(self, server: CRUDServer):
        response = server.handle_request(b"GET /unknownpath HTTP/1.1\r\n\r\n")

        assert response.status == 404
        assert response.body == b"404 not found"

    def test_get_non_numeric_id(self, server: CRUDServer):
        response = server.handle_request(b"GET /users/abc HTTP/1.1\r\n\r\n")

        assert response.status == 404
        assert response.body == b"User not found"

    def test_malformed_create(self, server: CRUDServer):
        response = server.handle_request(b"POST /users HTTP/1.1\r\n\r\n{nope")
        assert response.status == 500

    def test_writes_access_log_line(self, server: CRUDServer, caplog):
        caplog.set_level(logging.INFO, logger="crudserver.access")

        server.handle_request(
            b"GET /unknownpath HTTP/1.1\r\n\r\n",
            ("10.0.0.5", 4242),
            connection_id="abcd1234",
        )

        lines = [r.getMessage() for r in caplog.records if r.name == "crudserver.access"]
        assert len(lines) == 1
        assert lines[0].startswith("10.0.0.5 - - [")
        assert '"GET /unknownpath" 404 13 ' in lines[0]
