"""MCP resource definitions: 2 URI-based resources.

URIs: hactl://policy, hactl://tools.
Each resource has a ``_<name>_impl`` function testable without the mcp package.
"""

from __future__ import annotations

import json
from typing import Any

from hactl.domain.catalog import OPERATIONS
from hactl.domain.policy import assert_tool_allowed
from hactl.errors import AuthorizationError

# ---------------------------------------------------------------------------
# Resource implementations (testable without mcp)
# ---------------------------------------------------------------------------


def policy_impl(registry: Any) -> dict[str, Any]:
    """The active policy, without the access token."""
    return registry.policy.public_view()


def tools_impl(registry: Any) -> list[dict[str, Any]]:
    """Flat tool catalog with capability tags and write-gate status."""
    catalog: list[dict[str, Any]] = []
    for tool in OPERATIONS.values():
        try:
            assert_tool_allowed(registry.policy, tool.name)
            blocked = False
        except AuthorizationError:
            blocked = True
        catalog.append(
            {
                "name": tool.name,
                "capability": str(tool.capability),
                "category": tool.category,
                "blocked": blocked,
            }
        )
    return catalog


# ---------------------------------------------------------------------------
# Registration: wraps _impl functions with FastMCP decorators
# ---------------------------------------------------------------------------


def register_resources(server: Any, registry: Any) -> None:
    """Register both MCP resources on the FastMCP server."""

    @server.resource("hactl://policy")  # type: ignore[untyped-decorator]
    def policy_resource() -> str:
        """Allowed domains, write gate, and request bounds."""
        return json.dumps(policy_impl(registry), indent=2)

    @server.resource("hactl://tools")  # type: ignore[untyped-decorator]
    def tools_resource() -> str:
        """Every tool with its read/write tag."""
        return json.dumps(tools_impl(registry), indent=2)
