"""
Unit tests for connection handling and the server loop.

Most tests drive HTTPServer.handle_connection() over socket.socketpair(),
so no port is bound. The end-to-end tests at the bottom use the real
accept loop in a background thread.
"""

import gzip
import logging
import socket
from pathlib import Path
from typing import List

import pytest

from minihttpd import HTTPServer, ServerConfig
from minihttpd.core import Connection, ConnectionState
from minihttpd.http import HTTPResponse, ResponseBuilder, ok
from minihttpd.middleware import LoggingMiddleware


class FakeSocket:
    """Records sendall() calls instead of writing anywhere."""

    def __init__(self, incoming: bytes = b""):
        self.incoming = incoming
        self.writes: List[bytes] = []
        self.closed = False

    def settimeout(self, timeout):
        pass

    def recv(self, size: int) -> bytes:
        data, self.incoming = self.incoming[:size], self.incoming[size:]
        return data

    def sendall(self, data: bytes):
        self.writes.append(data)

    def shutdown(self, how):
        pass

    def close(self):
        self.closed = True


def exchange(server: HTTPServer, raw: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes through a socketpair and return everything written back."""
    server_side, client_side = socket.socketpair()
    with client_side:
        if raw:
            client_side.sendall(raw)
        else:
            client_side.shutdown(socket.SHUT_WR)

        conn = Connection(socket=server_side, address=("127.0.0.1", 40000), timeout=timeout)
        server.handle_connection(conn)

        client_side.settimeout(5.0)
        chunks = []
        while True:
            chunk = client_side.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def server(config: ServerConfig) -> HTTPServer:
    return HTTPServer(config)


class TestConnection:

    def test_single_read(self):
        sock = FakeSocket(b"x" * 2000)
        conn = Connection(socket=sock, address=("127.0.0.1", 1), buffer_size=1024)

        assert conn.read_request() == b"x" * 1024
        assert conn.state is ConnectionState.READING

    def test_head_and_body_are_separate_writes(self):
        sock = FakeSocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 1))
        response = ResponseBuilder().text("abc").build()

        assert conn.send_response(response) is True
        assert sock.writes == [response.head_bytes(), b"abc"]

    def test_empty_body_is_one_write(self):
        sock = FakeSocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 1))

        conn.send_response(ok())
        assert sock.writes == [b"HTTP/1.1 200 OK\r\n\r\n"]

    def test_send_failure_returns_false(self, caplog):
        class BrokenSocket(FakeSocket):
            def sendall(self, data):
                raise BrokenPipeError("gone")

        conn = Connection(socket=BrokenSocket(), address=("127.0.0.1", 1))

        with caplog.at_level(logging.WARNING, logger="minihttpd.core.connection"):
            assert conn.send_response(ok()) is False
        assert "Send failed" in caplog.text

    def test_close_is_idempotent(self):
        sock = FakeSocket()
        with Connection(socket=sock, address=("127.0.0.1", 1)) as conn:
            pass

        assert sock.closed
        assert conn.state is ConnectionState.CLOSED
        conn.close()


class TestHandleConnection:

    def test_root(self, server: HTTPServer):
        assert exchange(server, b"GET / HTTP/1.1\r\n\r\n") == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo(self, server: HTTPServer):
        reply = exchange(server, b"GET /echo/abc HTTP/1.1\r\nHost: localhost\r\n\r\n")

        assert reply == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_echo_gzip_body_is_raw_bytes(self, server: HTTPServer):
        reply = exchange(server, b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n")
        head, _, body = reply.partition(b"\r\n\r\n")

        assert b"Content-Encoding: gzip" in head
        assert f"Content-Length: {len(body)}".encode() in head
        assert gzip.decompress(body) == b"abc"

    def test_empty_read_is_root(self, server: HTTPServer):
        assert exchange(server, b"") == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_malformed_request_is_400(self, server: HTTPServer):
        assert exchange(server, b"GET\r\n\r\n") == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_nul_byte_file_name_is_404(self, server: HTTPServer):
        reply = exchange(server, b"GET /files/a\x00b HTTP/1.1\r\n\r\n")

        assert reply == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_file_upload(self, server: HTTPServer, sample_post_request: bytes,
                         tmp_path: Path):
        reply = exchange(server, sample_post_request)

        assert reply == b"HTTP/1.1 201 Created\r\n\r\n"
        assert (tmp_path / "notes.txt").read_bytes() == b"hello world"

    def test_content_length_mode(self, config: ServerConfig, tmp_path: Path):
        server = HTTPServer(config.with_overrides(body_mode="content-length"))
        raw = b"POST /files/multi HTTP/1.1\r\nContent-Length: 9\r\n\r\nline1\r\nxx"

        assert exchange(server, raw) == b"HTTP/1.1 201 Created\r\n\r\n"
        assert (tmp_path / "multi").read_bytes() == b"line1\r\nxx"

    def test_handler_exception_is_500(self, server: HTTPServer, caplog):
        def boom(request):
            raise RuntimeError("kaboom")

        server.router.add_route("/boom", boom)

        with caplog.at_level(logging.ERROR, logger="minihttpd.server"):
            reply = exchange(server, b"GET /boom HTTP/1.1\r\n\r\n")

        assert reply == b"HTTP/1.1 500 Internal Server Error\r\n\r\n"
        assert "kaboom" in caplog.text

    def test_content_length_mismatch_is_500(self, server: HTTPServer):
        def lying(request):
            return HTTPResponse(headers=[("Content-Length", "10")], body=b"abc")

        server.router.add_route("/lie", lying)

        assert exchange(server, b"GET /lie HTTP/1.1\r\n\r\n") == (
            b"HTTP/1.1 500 Internal Server Error\r\n\r\n"
        )

    def test_read_timeout_sends_nothing(self, server: HTTPServer):
        server_side, client_side = socket.socketpair()
        with client_side:
            conn = Connection(socket=server_side, address=("127.0.0.1", 1), timeout=0.1)
            server.handle_connection(conn)

            client_side.settimeout(5.0)
            assert client_side.recv(1024) == b""
        assert conn.state is ConnectionState.CLOSED

    def test_access_log(self, server: HTTPServer, caplog):
        server.use(LoggingMiddleware())

        with caplog.at_level(logging.INFO, logger="minihttpd.access"):
            exchange(server, b"GET /echo/hi HTTP/1.1\r\n\r\n")

        assert '"GET /echo/hi" 200 2' in caplog.text


class TestHTTPServer:

    def test_invalid_config_fails_fast(self, tmp_path: Path):
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(directory=str(tmp_path), port=70000))


class TestEndToEnd:
    """Real sockets, real accept loop."""

    def test_requests_in_sequence(self, test_server):
        assert test_server.request(b"GET / HTTP/1.1\r\n\r\n") == b"HTTP/1.1 200 OK\r\n\r\n"

        reply = test_server.request(
            b"GET /user-agent HTTP/1.1\r\nUser-Agent: foo/1.0\r\n\r\n"
        )
        assert reply.endswith(b"Content-Length: 7\r\n\r\nfoo/1.0")

        reply = test_server.request(b"GET /nope HTTP/1.1\r\n\r\n")
        assert reply == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_file_round_trip(self, test_server, tmp_path: Path):
        reply = test_server.request(b"POST /files/e2e HTTP/1.1\r\nContent-Length: 4\r\n\r\ndata")
        assert reply == b"HTTP/1.1 201 Created\r\n\r\n"

        reply = test_server.request(b"GET /files/e2e HTTP/1.1\r\n\r\n")
        assert reply == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/octet-stream\r\n"
            b"Content-Length: 4\r\n"
            b"\r\n"
            b"data"
        )
        assert (tmp_path / "e2e").read_bytes() == b"data"

    def test_delete_file_is_501(self, test_server):
        reply = test_server.request(b"DELETE /files/x HTTP/1.1\r\n\r\n")

        assert reply == b"HTTP/1.1 501 Not Implemented\r\n\r\n"

    def test_bound_port(self, test_server, free_port):
        assert test_server.port == free_port
