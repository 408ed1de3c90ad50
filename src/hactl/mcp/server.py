"""FastMCP server setup.

Optional extra: guarded behind try/except ImportError.
Transport: stdio default, SSE and streamable HTTP optional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from hactl.config.settings import HactlSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]

logger = structlog.get_logger(__name__)


def create_server(
    settings: HactlSettings,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> Any:
    """Create and configure the MCP server.

    Validates the policy from *settings* (raising ConfigurationError before
    anything is registered), builds the hub client and the operation
    registry, and registers all tools and resources. Returns the FastMCP
    instance.

    *host* and *port* configure the bind address for HTTP transports
    (sse, streamable-http). They are ignored when using stdio.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install hactl[mcp]"
        raise RuntimeError(msg)

    from hactl.infrastructure.hub_client import HubClient
    from hactl.mcp.resources import register_resources
    from hactl.mcp.tools import register_tools
    from hactl.services.operations import OperationRegistry

    policy = settings.policy()
    client = HubClient(policy.url, policy.token, timeout=policy.timeout_seconds)
    registry = OperationRegistry(client, policy)

    server = _FastMCP("hactl", host=host, port=port)

    register_tools(server, registry)
    register_resources(server, registry)

    logger.info(
        "mcp.server_ready",
        hub=policy.url,
        read_only=policy.read_only,
        allowed_domains=list(policy.allowed_domains),
    )
    return server
