"""Click base classes shared by every hactl command.

``examples=`` adds an eager ``--examples`` flag that prints usage and
exits. ``needs_hub=True`` marks commands that contact Home Assistant;
their help ends with where the hub URL and token come from.
"""

from __future__ import annotations

from typing import Any

import click

HUB_EPILOG = (
    "Needs a hub: pass --url and --token, set HACTL_URL and HACTL_TOKEN, "
    "or put url and token in hactl.toml."
)


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    command = ctx.command
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(getattr(command, "examples", ""))
    if getattr(command, "needs_hub", False):
        click.echo(f"\n{HUB_EPILOG}")
    ctx.exit(0)


def _examples_option() -> click.Option:
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show_examples,
        help="Show usage examples.",
    )


class HactlCommand(click.Command):
    """A command with optional ``--examples`` and a hub-credentials epilog."""

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        needs_hub: bool = False,
        **kwargs: Any,
    ) -> None:
        if needs_hub and not kwargs.get("epilog"):
            kwargs["epilog"] = HUB_EPILOG
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.needs_hub = needs_hub
        if examples:
            self.params.append(_examples_option())


class HactlGroup(click.Group):
    """Root group; subcommands default to :class:`HactlCommand`."""

    command_class = HactlCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option())
