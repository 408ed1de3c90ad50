"""Home Assistant REST client: one bounded request per call.

REST API reference: https://developers.home-assistant.io/docs/api/rest/

Response decoding is an explicit three-way outcome (see :func:`decode_body`):
empty body -> ``{}``, JSON body -> parsed value, anything else -> raw text.
Non-2xx responses raise :class:`HubHTTPError`; timeouts raise
:class:`HubTimeoutError`. Every other httpx transport error propagates as-is.
"""

from __future__ import annotations

import json
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from hactl.errors import HubHTTPError, HubTimeoutError

DEFAULT_TIMEOUT_SECONDS = 30.0

logger = structlog.get_logger(__name__)


class BodyKind(StrEnum):
    EMPTY = "empty"
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class DecodedBody:
    kind: BodyKind
    value: Any


@dataclass(frozen=True)
class ServiceInvocation:
    """A single ``POST /api/services/{domain}/{service}`` call."""

    domain: str
    service: str
    payload: dict[str, Any] = field(default_factory=dict)


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not JSON; treat such bodies as text.
    raise ValueError(name)


def decode_body(raw: str) -> DecodedBody:
    """Classify a successful response body as empty, JSON, or text."""
    if not raw:
        return DecodedBody(BodyKind.EMPTY, {})
    try:
        value = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return DecodedBody(BodyKind.TEXT, raw)
    return DecodedBody(BodyKind.JSON, value)


def encode_segment(value: str) -> str:
    """Percent-encode one caller-supplied path or query value."""
    return quote(str(value), safe="")


def _query(params: dict[str, str | None]) -> str:
    pairs = [f"{key}={encode_segment(val)}" for key, val in params.items() if val]
    return f"?{'&'.join(pairs)}" if pairs else ""


class HubClient:
    """Synchronous client for the hub's HTTP control API.

    Holds the base URL and credential for the life of the process.
    The underlying :class:`httpx.Client` is safe to share between threads.

    Usage::

        with HubClient("http://ha.local:8123", token) as client:
            client.get_state("light.kitchen")
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )
        self._pool = ThreadPoolExecutor(thread_name_prefix="hactl-hub")

    def close(self) -> None:
        # Abandoned calls stop at their own deadline, so this wait is bounded.
        self._pool.shutdown(wait=True, cancel_futures=True)
        self._http.close()

    def __enter__(self) -> HubClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- Core request -------------------------------------------------------

    def execute(self, method: str, path: str, body: Any = None) -> Any:
        """Issue one request and decode the response.

        GET requests never carry a body. Other methods send *body* as JSON,
        or ``{}`` when *body* is None.

        ``timeout`` is a wall-clock bound on the whole call, from connect to
        the last body byte. A hub that trickles its answer past the bound
        raises :class:`HubTimeoutError` like one that never answers.
        """
        method = method.upper()
        content = None if method == "GET" else json.dumps({} if body is None else body)
        started = time.perf_counter()
        deadline = time.monotonic() + self.timeout
        future = self._pool.submit(self._send, method, f"{self.base_url}{path}", content, deadline)
        try:
            status, raw = future.result(timeout=max(deadline - time.monotonic(), 0.0))
        except (httpx.TimeoutException, FutureTimeoutError) as exc:
            future.cancel()
            timeout_ms = int(self.timeout * 1000)
            logger.warning("hub.timeout", method=method, path=path, timeout_ms=timeout_ms)
            raise HubTimeoutError(method, path, timeout_ms) from exc

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        if not 200 <= status < 300:
            logger.warning(
                "hub.error",
                method=method,
                path=path,
                status=status,
                duration_ms=duration_ms,
            )
            raise HubHTTPError(status, raw)

        decoded = decode_body(raw)
        logger.debug(
            "hub.request",
            method=method,
            path=path,
            status=status,
            body_kind=str(decoded.kind),
            duration_ms=duration_ms,
        )
        return decoded.value

    def _send(self, method: str, url: str, content: str | None, deadline: float) -> tuple[int, str]:
        """Run on a pool thread: stream the response, giving up at *deadline*."""
        remaining = max(deadline - time.monotonic(), 0.001)
        with self._http.stream(
            method, url, content=content, timeout=httpx.Timeout(remaining)
        ) as response:
            chunks: list[str] = []
            for chunk in response.iter_text():
                chunks.append(chunk)
                if time.monotonic() >= deadline:
                    raise httpx.ReadTimeout("hub call deadline exceeded", request=response.request)
            return response.status_code, "".join(chunks)

    def check_connection(self) -> bool:
        """Probe ``GET /api/``. True when the hub answers 2xx; errors propagate."""
        self.execute("GET", "/api/")
        return True

    # -- Endpoints ----------------------------------------------------------

    def get_config(self) -> Any:
        return self.execute("GET", "/api/config")

    def get_states(self) -> Any:
        return self.execute("GET", "/api/states")

    def get_state(self, entity_id: str) -> Any:
        return self.execute("GET", f"/api/states/{encode_segment(entity_id)}")

    def get_services(self) -> Any:
        return self.execute("GET", "/api/services")

    def call_service(self, invocation: ServiceInvocation) -> Any:
        path = (
            f"/api/services/{encode_segment(invocation.domain)}"
            f"/{encode_segment(invocation.service)}"
        )
        return self.execute("POST", path, invocation.payload)

    def get_history(
        self, start: str, entity_id: str | None = None, end: str | None = None
    ) -> Any:
        suffix = _query({"filter_entity_id": entity_id, "end_time": end})
        return self.execute("GET", f"/api/history/period/{encode_segment(start)}{suffix}")

    def get_logbook(
        self, start: str, entity_id: str | None = None, end: str | None = None
    ) -> Any:
        suffix = _query({"entity": entity_id, "end_time": end})
        return self.execute("GET", f"/api/logbook/{encode_segment(start)}{suffix}")

    def render_template(self, template: str, variables: dict[str, Any] | None = None) -> Any:
        return self.execute("POST", "/api/template", {**(variables or {}), "template": template})

    def fire_event(self, event_type: str, event_data: dict[str, Any] | None = None) -> Any:
        return self.execute("POST", f"/api/events/{encode_segment(event_type)}", event_data or {})
