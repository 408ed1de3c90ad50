"""serve: start the MCP server (requires hactl[mcp] extra)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hactl.commands._base import HactlCommand
from hactl.errors import ConfigurationError

if TYPE_CHECKING:
    from hactl.commands._context import AppContext


@click.command(
    cls=HactlCommand,
    needs_hub=True,
    examples="""\
  # Start the MCP server (stdio transport, default)
  hactl serve

  # Streamable HTTP on custom host/port
  hactl serve --transport streamable-http --host 0.0.0.0 --port 9000

  # Read-only server limited to the light domain
  hactl --read-only --allow-domain light serve""",
)
@click.option(
    "--transport",
    default="stdio",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol.",
)
@click.option("--host", default="127.0.0.1", help="Bind address (HTTP transports only).")
@click.option("--port", default=8000, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: AppContext, transport: str, host: str, port: int) -> None:
    """Start the MCP server (requires hactl[mcp] extra)."""
    from hactl.mcp import server as mcp_server

    if not mcp_server.mcp_available:
        click.echo("MCP not installed. Install with: pip install hactl[mcp]", err=True)
        raise SystemExit(1)

    try:
        server = mcp_server.create_server(app.settings, host=host, port=port)
    except ConfigurationError as exc:
        app.fail("serve", exc)
        return
    server.run(transport=transport)
