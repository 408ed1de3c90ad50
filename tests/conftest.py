"""Shared pytest fixtures and test helpers for hactl tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from hactl.config.models import PolicyConfig, validate_config
from hactl.infrastructure.hub_client import ServiceInvocation

HUB_URL = "http://ha.local:8123"
HUB_TOKEN = "test-token"

SAMPLE_STATES: list[dict[str, Any]] = [
    {
        "entity_id": "light.kitchen",
        "state": "on",
        "attributes": {
            "friendly_name": "Kitchen Light",
            "brightness": 200,
            "color_temp": 370,
            "rgb_color": [255, 200, 150],
            "area_id": "kitchen",
        },
    },
    {
        "entity_id": "light.porch",
        "state": "off",
        "attributes": {"friendly_name": "Porch Light", "area_id": "outside"},
    },
    {
        "entity_id": "switch.coffee",
        "state": "off",
        "attributes": {"friendly_name": "Coffee Maker", "area_id": "kitchen"},
    },
    {
        "entity_id": "sensor.outdoor_temp",
        "state": "18.5",
        "attributes": {"friendly_name": "Outdoor Temperature", "unit_of_measurement": "°C"},
    },
    {
        "entity_id": "climate.hallway",
        "state": "heat",
        "attributes": {"friendly_name": "Hallway Thermostat", "temperature": 21},
    },
    {
        "entity_id": "lock.front_door",
        "state": "locked",
        "attributes": {"friendly_name": "Front Door"},
    },
]


class FakeHubClient:
    """Records every hub call and answers from canned data."""

    def __init__(
        self,
        *,
        states: list[dict[str, Any]] | None = None,
        services: list[dict[str, Any]] | None = None,
        history: Any = None,
        logbook: Any = None,
    ) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.states = SAMPLE_STATES if states is None else states
        self.services = services or []
        self.history = [] if history is None else history
        self.logbook = [] if logbook is None else logbook

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    @property
    def invocations(self) -> list[ServiceInvocation]:
        return [args[0] for name, args in self.calls if name == "call_service"]

    def get_config(self) -> Any:
        self._record("get_config")
        return {"version": "2024.6.0", "location_name": "Home"}

    def get_states(self) -> Any:
        self._record("get_states")
        return self.states

    def get_state(self, entity_id: str) -> Any:
        self._record("get_state", entity_id)
        return {"entity_id": entity_id, "state": "on"}

    def get_services(self) -> Any:
        self._record("get_services")
        return self.services

    def call_service(self, invocation: ServiceInvocation) -> Any:
        self._record("call_service", invocation)
        return []

    def get_history(self, start: str, entity_id: str | None = None, end: str | None = None) -> Any:
        self._record("get_history", start, entity_id, end)
        return self.history

    def get_logbook(self, start: str, entity_id: str | None = None, end: str | None = None) -> Any:
        self._record("get_logbook", start, entity_id, end)
        return self.logbook

    def render_template(self, template: str, variables: dict[str, Any] | None = None) -> Any:
        self._record("render_template", template, variables)
        return "rendered"

    def fire_event(self, event_type: str, event_data: dict[str, Any] | None = None) -> Any:
        self._record("fire_event", event_type, event_data)
        return {"message": f"Event {event_type} fired."}


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real HACTL_* variables and stray hactl.toml files out of every test."""
    for key in list(os.environ):
        if key.startswith("HACTL_"):
            monkeypatch.delenv(key)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_policy() -> Callable[..., PolicyConfig]:
    """Build a validated PolicyConfig from camelCase overrides."""

    def _make(**overrides: Any) -> PolicyConfig:
        return validate_config({"url": HUB_URL, "token": HUB_TOKEN, **overrides})

    return _make


@pytest.fixture
def fake_client() -> FakeHubClient:
    return FakeHubClient()


@pytest.fixture
def make_client() -> type[FakeHubClient]:
    """The fake client class, for tests that need custom canned data."""
    return FakeHubClient
