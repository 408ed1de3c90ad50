"""Fixtures for command tests: a HubClient wired to an httpx.MockTransport."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from hactl.infrastructure.hub_client import HubClient

HUB_FLAGS = ["--url", "http://ha.local:8123", "--token", "cli-token"]


class MockHub:
    """Records requests and answers through a swappable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda _request: (
            httpx.Response(200, json={"message": "API running."})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


@contextmanager
def _patched_client(hub: MockHub) -> Iterator[None]:
    def factory(base_url: str, token: str, **kwargs: Any) -> HubClient:
        return HubClient(base_url, token, transport=httpx.MockTransport(hub), **kwargs)

    with patch("hactl.infrastructure.hub_client.HubClient", factory):
        yield


@pytest.fixture
def hub() -> Iterator[MockHub]:
    """Route every HubClient the CLI builds to an in-process mock hub."""
    mock = MockHub()
    with _patched_client(mock):
        yield mock


@pytest.fixture
def hub_flags() -> list[str]:
    return list(HUB_FLAGS)
