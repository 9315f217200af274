import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

STATS_XML = """<?xml version="1.0" standalone="yes" ?>
<SHOUTCASTSERVER>
<CURRENTLISTENERS>12</CURRENTLISTENERS>
<PEAKLISTENERS>40</PEAKLISTENERS>
<MAXLISTENERS>100</MAXLISTENERS>
<UNIQUELISTENERS>11</UNIQUELISTENERS>
<AVERAGETIME>1834</AVERAGETIME>
<SERVERGENRE>Electronic</SERVERGENRE>
<SERVERURL>http://radio.example.com</SERVERURL>
<SERVERTITLE>Mighty Radio</SERVERTITLE>
<SONGTITLE>Daft Punk - Around the World</SONGTITLE>
<STREAMHITS>5321</STREAMHITS>
<STREAMSTATUS>1</STREAMSTATUS>
<BACKUPSTATUS>0</BACKUPSTATUS>
<STREAMPATH>/stream</STREAMPATH>
<STREAMUPTIME>86400</STREAMUPTIME>
<BITRATE>128</BITRATE>
<CONTENT>audio/mpeg</CONTENT>
<VERSION>2.5.5.733 (posix(linux x64))</VERSION>
</SHOUTCASTSERVER>
"""


class _Handler(BaseHTTPRequestHandler):
    # class attributes are overwritten per server in the fixture
    status = 200
    body = STATS_XML
    content_type = "text/xml; charset=utf-8"
    encoding = "utf-8"
    seen = None

    def do_GET(self):
        self.seen.append(dict(self.headers))
        data = self.body.encode(self.encoding)
        self.send_response(self.status)
        self.send_header("Content-Type", self.content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    """
    Local HTTP server. Yields (base_url, handler_class); set handler.body,
    handler.status, handler.content_type and handler.encoding to shape the
    response, handler.seen lists request headers.
    """
    handler = type("Handler", (_Handler,), {"seen": []})
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address
    yield f"http://{host}:{port}/stats", handler
    server.shutdown()
    server.server_close()


@pytest.fixture
def silent_server():
    """Accepts connections (via the listen backlog) but never answers."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    host, port = sock.getsockname()
    yield f"http://{host}:{port}/"
    sock.close()


@pytest.fixture
def closed_port_url():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    host, port = sock.getsockname()
    sock.close()
    return f"http://{host}:{port}/"


@pytest.fixture
def broken_body_server():
    """Answers with valid headers and a corrupt chunked body."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    host, port = sock.getsockname()

    def serve():
        try:
            conn, _ = sock.accept()
        except OSError:
            return
        with conn:
            conn.recv(65536)
            conn.sendall(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: text/plain\r\n"
                b"Transfer-Encoding: chunked\r\n"
                b"\r\n"
                b"zz\r\nnot a chunk\r\n"
            )

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield f"http://{host}:{port}/"
    sock.close()
    thread.join(timeout=2)


@pytest.fixture
def trickle_server():
    """Sends headers at once, then the body one byte every 0.4s."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    host, port = sock.getsockname()
    body = b"x" * 10

    def serve():
        try:
            conn, _ = sock.accept()
        except OSError:
            return
        with conn:
            try:
                conn.recv(65536)
                conn.sendall(
                    b"HTTP/1.1 200 OK\r\n"
                    b"Content-Type: text/plain\r\n"
                    + f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
                )
                for i in range(len(body)):
                    time.sleep(0.4)
                    conn.sendall(body[i:i + 1])
            except OSError:
                # client gave up
                return

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield f"http://{host}:{port}/"
    sock.close()
