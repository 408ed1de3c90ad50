"""Authorization guards: pure predicates over the policy record.

Two independent policies:
- Write gate: ``read_only`` blocks every write-tagged operation.
- Domain allow-list: a non-empty ``allowed_domains`` restricts which
  entity domains may be read or targeted. Empty means unrestricted.

INVARIANT: Guards never mutate state and never touch the network.
Calling one twice with the same inputs gives the same decision.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from hactl.domain.catalog import is_write_tool
from hactl.domain.entities import EntityReference, parse_entity_id
from hactl.errors import AuthorizationError

KNOWN_DOMAINS: tuple[str, ...] = (
    "alarm_control_panel", "automation", "binary_sensor", "button",
    "calendar", "camera", "climate", "cover", "device_tracker",
    "fan", "group", "humidifier", "input_boolean", "input_button",
    "input_datetime", "input_number", "input_select", "input_text",
    "light", "lock", "media_player", "notify", "number", "person",
    "remote", "scene", "script", "select", "sensor", "siren",
    "switch", "timer", "update", "vacuum", "water_heater", "weather", "zone",
)  # fmt: skip


class PolicyLike(Protocol):
    """The two policy fields the guards read."""

    @property
    def allowed_domains(self) -> Iterable[str]: ...

    @property
    def read_only(self) -> bool: ...


def _allowed(policy: PolicyLike) -> set[str]:
    return {d.lower() for d in policy.allowed_domains}


def assert_tool_allowed(policy: PolicyLike, tool_name: str) -> None:
    """Reject *tool_name* if the write gate is on and the tool mutates state."""
    if policy.read_only and is_write_tool(tool_name):
        msg = f"Tool {tool_name} is blocked because readOnly=true"
        raise AuthorizationError(msg, details={"tool": tool_name})


def is_domain_allowed(policy: PolicyLike, domain: str) -> bool:
    allowed = _allowed(policy)
    return not allowed or domain.lower() in allowed


def assert_domain_allowed(policy: PolicyLike, domain: str) -> None:
    """Reject *domain* if a non-empty allow-list excludes it (case-insensitive)."""
    if not is_domain_allowed(policy, domain):
        msg = f"Domain {domain} is blocked by allowedDomains policy"
        raise AuthorizationError(msg, details={"domain": domain})


def assert_entity_allowed(policy: PolicyLike, entity_id: object) -> EntityReference:
    """Parse *entity_id* and check its domain. Returns the parsed reference."""
    ref = parse_entity_id(entity_id)
    assert_domain_allowed(policy, ref.domain)
    return ref


def unknown_domains(domains: Iterable[str]) -> list[str]:
    """Allow-list entries that are not standard Home Assistant domains.

    Informational only: custom integrations add their own domains.
    """
    known = set(KNOWN_DOMAINS)
    return sorted({d for d in domains if d not in known})
