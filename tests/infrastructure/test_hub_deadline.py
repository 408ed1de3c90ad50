"""HubClient's per-call deadline, against a real local HTTP server."""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from hactl.errors import HubTimeoutError
from hactl.infrastructure.hub_client import HubClient

TIMEOUT = 0.5
# Scheduling slack on slow CI machines.
SLACK = 0.75


class SlowHub(BaseHTTPRequestHandler):
    """Answers ``/api/states`` in one of three paces chosen by the path."""

    stop = threading.Event()

    def log_message(self, format: str, *args: object) -> None:
        pass

    def do_GET(self) -> None:
        body = b'[{"entity_id": "light.kitchen", "state": "on"}]'
        try:
            if self.path.startswith("/stall"):
                self.stop.wait(5)
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if self.path.startswith("/drip"):
                # One byte every 100ms: each read succeeds, the whole body takes ~5s.
                for byte in body:
                    if self.stop.wait(0.1):
                        return
                    self.wfile.write(bytes([byte]))
                    self.wfile.flush()
            else:
                self.wfile.write(body)
        except OSError:
            pass


@pytest.fixture
def slow_hub() -> Iterator[str]:
    SlowHub.stop.clear()
    server = ThreadingHTTPServer(("127.0.0.1", 0), SlowHub)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        SlowHub.stop.set()
        server.shutdown()
        server.server_close()


def _timed_call(base_url: str, path: str) -> tuple[float, HubTimeoutError]:
    with HubClient(base_url, "secret", timeout=TIMEOUT) as client:
        started = time.monotonic()
        with pytest.raises(HubTimeoutError) as exc_info:
            client.execute("GET", path)
        return time.monotonic() - started, exc_info.value


class TestCallDeadline:
    def test_prompt_answer_passes(self, slow_hub: str) -> None:
        with HubClient(slow_hub, "secret", timeout=TIMEOUT) as client:
            assert client.get_states() == [{"entity_id": "light.kitchen", "state": "on"}]

    def test_trickled_body_hits_the_deadline(self, slow_hub: str) -> None:
        elapsed, err = _timed_call(slow_hub, "/drip/api/states")
        assert elapsed < TIMEOUT + SLACK
        assert err.timeout_ms == 500
        assert "timed out" in err.message
        assert "GET /drip/api/states" in err.message

    def test_stalled_headers_hit_the_deadline(self, slow_hub: str) -> None:
        elapsed, err = _timed_call(slow_hub, "/stall/api/states")
        assert elapsed < TIMEOUT + SLACK
        assert err.path == "/stall/api/states"
