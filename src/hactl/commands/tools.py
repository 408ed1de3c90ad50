"""tools: list the operation catalog with read/write tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hactl.commands._base import HactlCommand
from hactl.domain.catalog import categories, describe_catalog
from hactl.services.result import ServiceResult

if TYPE_CHECKING:
    from hactl.commands._context import AppContext


@click.command(
    cls=HactlCommand,
    examples="""\
  hactl tools
  hactl tools --category lights
  hactl --read-only tools
  hactl --json tools""",
)
@click.option(
    "--category",
    type=click.Choice(categories()),
    default=None,
    help="Only show tools in this category.",
)
@click.pass_obj
def tools(app: AppContext, category: str | None) -> None:
    """List every tool, marking the ones the write gate blocks.

    Needs no hub connection; only the read-only setting is consulted.
    """
    data = describe_catalog(read_only=bool(app.settings.read_only), category=category)
    app.emit(ServiceResult.success("discover_tools", data))
