"""Shared fixtures for the nodepush client tests."""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from loguru import logger


class IngestServer:
    """Local HTTP server that records posted node readings."""

    def __init__(self):
        self.requests = []
        self.status = 200
        self.response_body = '{"status": "ok"}'
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._make_handler())
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def _make_handler(self):
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length", 0))
                body = self.rfile.read(length).decode("utf-8")
                server.requests.append(
                    {
                        "path": self.path,
                        "headers": dict(self.headers.items()),
                        "body": body,
                        "json": json.loads(body) if body else None,
                    }
                )
                payload = server.response_body.encode("utf-8")
                self.send_response(server.status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            def log_message(self, format, *args):
                pass

        return Handler

    def start(self):
        self._thread.start()

    def stop(self):
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5.0)


@pytest.fixture
def ingest_server():
    server = IngestServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def closed_port_url():
    """URL of a port nothing listens on."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), BaseHTTPRequestHandler)
    host, port = server.server_address[:2]
    server.server_close()
    return f"http://{host}:{port}"


@pytest.fixture
def log_records():
    """Capture loguru records as (level, message) tuples."""
    records = []
    handler_id = logger.add(lambda msg: records.append((msg.record["level"].name, msg.record["message"])), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep NODEPUSH_* variables from the host out of the tests."""
    for name in (
        "NODEPUSH_SERVER_URL",
        "NODEPUSH_MAC",
        "NODEPUSH_HEADERS",
        "NODEPUSH_POLL_INTERVAL",
        "NODEPUSH_TIMEOUT",
        "NODEPUSH_LOG_LEVEL",
        "NODEPUSH_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
