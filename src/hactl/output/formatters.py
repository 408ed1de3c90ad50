"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables and styled
key-value lines) or machines (--json). Hub payloads are arbitrary JSON
values or plain text, so the human renderer picks a layout from the
shape of ``result.data``.
"""

from __future__ import annotations

import json as _json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from hactl.output.console import create_console, get_output, style_for_capability

if TYPE_CHECKING:
    from rich.console import Console

    from hactl.services.result import ServiceResult


def format_result(
    result: ServiceResult, *, json_output: bool = False, verbose: bool = False
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
        verbose: Include error detail in human output.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console()
    if not result.ok:
        _render_error(console, result, verbose=verbose)
    elif result.op == "discover_tools":
        _status_line(console, result)
        _render_catalog(console, result.data)
    else:
        _status_line(console, result)
        _render_data(console, result.data)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _compact(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="hactl.ok"), Text(f"  {result.op}", style="hactl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    style = "hactl.entity" if key == "entity_id" else ""
    console.print(Text(f"  {key}:", style="hactl.key"), Text(_compact(value), style=style))


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="hactl.error"), Text(f"  {result.op}", style="hactl.op"))
    console.print(f"  {msg}", markup=False)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {_compact(value)}", markup=False)


def _render_data(console: Console, data: Any) -> None:
    if isinstance(data, str):
        for line in data.splitlines() or [""]:
            console.print(f"  {line}", markup=False)
    elif isinstance(data, Mapping):
        for key, value in data.items():
            _field(console, str(key), value)
    elif isinstance(data, list) and data and all(_is_state(item) for item in data):
        console.print(_state_table(data))
    elif isinstance(data, list):
        for item in data:
            console.print(f"  {_compact(item)}", markup=False)
    elif data is not None:
        console.print(f"  {data}", markup=False)


def _is_state(item: Any) -> bool:
    return isinstance(item, Mapping) and "entity_id" in item


def _state_table(states: list[Mapping[str, Any]]) -> Table:
    """Build a Rich Table for a list of entity states."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Entity", style="hactl.entity", no_wrap=True)
    table.add_column("State")
    table.add_column("Name")
    for state in states:
        attributes = state.get("attributes")
        name = attributes.get("friendly_name", "") if isinstance(attributes, Mapping) else ""
        table.add_row(str(state["entity_id"]), str(state.get("state", "")), str(name))
    return table


def _render_catalog(console: Console, data: Mapping[str, Any]) -> None:
    """Render ``describe_catalog`` output as one table per category."""
    for category in data.get("categories", []):
        table = Table(
            title=category["name"],
            title_justify="left",
            show_header=True,
            pad_edge=False,
            expand=False,
        )
        table.add_column("Tool", no_wrap=True)
        table.add_column("Access")
        table.add_column("Description")
        for tool in category["tools"]:
            capability = tool["capability"]
            access = Text(capability, style=style_for_capability(capability))
            if tool["blocked"]:
                access = Text("blocked", style="hactl.blocked")
            table.add_row(tool["name"], access, tool["description"])
        console.print(table)
    console.print(Text(f"  {data.get('count', 0)} tools", style="dim"))
