"""call: invoke one operation through the policy gate."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from hactl.commands._base import HactlCommand
from hactl.domain.catalog import OPERATIONS
from hactl.errors import ValidationError

if TYPE_CHECKING:
    from hactl.commands._context import AppContext


def _resolve_name(name: str) -> str:
    """Accept ``light_on`` as shorthand for ``ha_light_on``."""
    if name not in OPERATIONS and f"ha_{name}" in OPERATIONS:
        return f"ha_{name}"
    return name


def _parse_arguments(raw: str | None) -> dict[str, Any]:
    if raw is None:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"--args is not valid JSON: {exc.msg}") from exc
    if not isinstance(value, dict):
        raise ValidationError("--args must be a JSON object")
    return value


@click.command(
    cls=HactlCommand,
    needs_hub=True,
    examples="""\
  hactl call ha_status
  hactl call light_on --args '{"entity_id": "light.kitchen", "brightness": 128}'
  hactl call ha_history --args '{"entity_id": "sensor.outdoor_temp"}'
  echo '{"pattern": "kitchen"}' | hactl call ha_search_entities --args -""",
)
@click.argument("name")
@click.option(
    "-a",
    "--args",
    "raw_args",
    default=None,
    help="Operation arguments as a JSON object ('-' reads stdin).",
)
@click.pass_obj
def call(app: AppContext, name: str, raw_args: str | None) -> None:
    """Invoke operation NAME and print the hub's answer."""
    op = _resolve_name(name)
    if raw_args == "-":
        raw_args = click.get_text_stream("stdin").read()
    try:
        arguments = _parse_arguments(raw_args)
    except ValidationError as exc:
        app.fail(op, exc)
        return
    app.emit(app.invoke(op, arguments))
