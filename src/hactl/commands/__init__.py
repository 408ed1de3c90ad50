"""Subcommand modules for hactl.

Provides register_commands() which uses deferred imports to keep
``hactl --help`` fast and free of MCP imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from hactl.commands.call import call
    from hactl.commands.check import check
    from hactl.commands.serve import serve
    from hactl.commands.tools import tools

    cli.add_command(serve)
    cli.add_command(tools)
    cli.add_command(call)
    cli.add_command(check)
