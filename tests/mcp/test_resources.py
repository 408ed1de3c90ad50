"""Tests for MCP resource _impl functions and registration."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from hactl.config.models import PolicyConfig
from hactl.mcp.resources import policy_impl, register_resources, tools_impl
from hactl.services.operations import OperationRegistry

MakePolicy = Callable[..., PolicyConfig]


class DummyServer:
    def __init__(self) -> None:
        self.resources: dict[str, Callable[[], str]] = {}

    def resource(self, uri: str) -> Callable[[Callable[[], str]], Callable[[], str]]:
        def decorator(fn: Callable[[], str]) -> Callable[[], str]:
            self.resources[uri] = fn
            return fn

        return decorator


class TestResources:
    def test_policy_hides_token(self, fake_client: Any, make_policy: MakePolicy) -> None:
        registry = OperationRegistry(fake_client, make_policy(allowedDomains=["light"]))
        view = policy_impl(registry)
        assert "token" not in view
        assert view["allowedDomains"] == ["light"]

    def test_tools_catalog(self, fake_client: Any, make_policy: MakePolicy) -> None:
        registry = OperationRegistry(fake_client, make_policy(readOnly=True))
        catalog = {entry["name"]: entry for entry in tools_impl(registry)}
        assert len(catalog) == 34
        assert catalog["ha_light_on"]["capability"] == "write"
        assert catalog["ha_light_on"]["blocked"] is True
        assert catalog["ha_history"]["blocked"] is False
        assert catalog["ha_history"]["category"] == "history"

    def test_register_resources(self, fake_client: Any, make_policy: MakePolicy) -> None:
        server = DummyServer()
        register_resources(server, OperationRegistry(fake_client, make_policy()))
        assert set(server.resources) == {"hactl://policy", "hactl://tools"}
        policy = json.loads(server.resources["hactl://policy"]())
        assert policy["readOnly"] is False
        assert "test-token" not in server.resources["hactl://policy"]()
