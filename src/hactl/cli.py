"""Root CLI group for hactl with global flags and command registration."""

from __future__ import annotations

import click

from hactl import __version__
from hactl.commands import register_commands
from hactl.commands._base import HactlGroup
from hactl.commands._context import AppContext
from hactl.config.settings import HactlSettings
from hactl.errors import ConfigurationError
from hactl.output.formatters import format_result
from hactl.services.result import ServiceResult


@click.group(
    cls=HactlGroup,
    invoke_without_command=True,
    examples="""\
  # Point at a hub and list what an agent may do
  hactl --url http://homeassistant.local:8123 --token "$HA_TOKEN" tools

  # Read-only session restricted to lights and sensors
  hactl --read-only --allow-domain light --allow-domain sensor serve

  # Use an explicit config file
  hactl -c ./hactl.toml check""",
)
@click.version_option(version=__version__, prog_name="hactl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--url", default=None, help="Home Assistant base URL.")
@click.option("--token", default=None, help="Long-lived access token.")
@click.option("--read-only", is_flag=True, help="Block every state-changing tool.")
@click.option(
    "--allow-domain",
    "allow_domains",
    multiple=True,
    help="Restrict entity access to this domain (repeatable).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    url: str | None,
    token: str | None,
    read_only: bool,
    allow_domains: tuple[str, ...],
) -> None:
    """hactl: policy-gated Home Assistant control for agents."""
    ctx.ensure_object(dict)
    try:
        settings = HactlSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
            url=url,
            token=token,
            # The flag can only tighten the write gate, never loosen it.
            read_only=True if read_only else None,
            allowed_domains=list(allow_domains) or None,
        )
    except ConfigurationError as exc:
        click.echo(
            format_result(ServiceResult.failure("config", exc), json_output=json_output),
            err=True,
        )
        raise SystemExit(1) from exc
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
