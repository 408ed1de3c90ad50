"""Tests for the write gate and domain allow-list guards."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from hactl.config.models import PolicyConfig
from hactl.domain.catalog import TOOL_NAMES, WRITE_TOOLS
from hactl.domain.policy import (
    assert_domain_allowed,
    assert_entity_allowed,
    assert_tool_allowed,
    is_domain_allowed,
    unknown_domains,
)
from hactl.errors import AuthorizationError, ValidationError

MakePolicy = Callable[..., PolicyConfig]


class TestWriteGate:
    @pytest.mark.parametrize("tool", sorted(WRITE_TOOLS))
    def test_read_only_blocks_every_write_tool(self, make_policy: MakePolicy, tool: str) -> None:
        policy = make_policy(readOnly=True)
        with pytest.raises(AuthorizationError) as exc_info:
            assert_tool_allowed(policy, tool)
        assert exc_info.value.message == f"Tool {tool} is blocked because readOnly=true"

    @pytest.mark.parametrize("tool", sorted(set(TOOL_NAMES) - WRITE_TOOLS))
    def test_read_only_allows_read_tools(self, make_policy: MakePolicy, tool: str) -> None:
        assert_tool_allowed(make_policy(readOnly=True), tool)

    def test_writes_allowed_when_not_read_only(self, make_policy: MakePolicy) -> None:
        for tool in WRITE_TOOLS:
            assert_tool_allowed(make_policy(), tool)

    def test_error_code(self, make_policy: MakePolicy) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            assert_tool_allowed(make_policy(readOnly=True), "ha_light_on")
        assert exc_info.value.code == "AUTHORIZATION"
        assert exc_info.value.details == {"tool": "ha_light_on"}


class TestDomainAllowList:
    def test_empty_list_allows_everything(self, make_policy: MakePolicy) -> None:
        policy = make_policy()
        assert is_domain_allowed(policy, "lock")
        assert_domain_allowed(policy, "anything_custom")

    def test_membership(self, make_policy: MakePolicy) -> None:
        policy = make_policy(allowedDomains=["light", "sensor"])
        assert is_domain_allowed(policy, "light")
        assert not is_domain_allowed(policy, "lock")

    def test_case_insensitive(self, make_policy: MakePolicy) -> None:
        policy = make_policy(allowedDomains=["Light"])
        assert is_domain_allowed(policy, "LIGHT")
        assert_domain_allowed(policy, "light")

    def test_blocked_message(self, make_policy: MakePolicy) -> None:
        policy = make_policy(allowedDomains=["light"])
        with pytest.raises(AuthorizationError, match="Domain lock is blocked by allowedDomains"):
            assert_domain_allowed(policy, "lock")


class TestEntityGuard:
    def test_returns_normalized_reference(self, make_policy: MakePolicy) -> None:
        ref = assert_entity_allowed(make_policy(allowedDomains=["light"]), "Light.Kitchen")
        assert ref.entity_id == "light.kitchen"

    def test_malformed_is_validation_error(self, make_policy: MakePolicy) -> None:
        with pytest.raises(ValidationError):
            assert_entity_allowed(make_policy(allowedDomains=["light"]), "kitchen")

    def test_disallowed_domain(self, make_policy: MakePolicy) -> None:
        with pytest.raises(AuthorizationError):
            assert_entity_allowed(make_policy(allowedDomains=["light"]), "lock.front_door")

    def test_guards_are_deterministic(self, make_policy: MakePolicy) -> None:
        policy = make_policy(allowedDomains=["light"])
        first = assert_entity_allowed(policy, "light.kitchen")
        second = assert_entity_allowed(policy, "light.kitchen")
        assert first == second


class TestUnknownDomains:
    def test_standard_domains_are_known(self) -> None:
        assert unknown_domains(["light", "sensor", "media_player"]) == []

    def test_reports_custom_domains_sorted(self) -> None:
        assert unknown_domains(["zigbee2mqtt", "light", "hacs"]) == ["hacs", "zigbee2mqtt"]
