"""Rich Console factory and theme for hactl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

HACTL_THEME = Theme(
    {
        "hactl.ok": "bold green",
        "hactl.error": "bold red",
        "hactl.op": "bold cyan",
        "hactl.key": "dim",
        "hactl.entity": "bold blue",
        "hactl.read": "green",
        "hactl.write": "yellow",
        "hactl.blocked": "red",
    }
)

_CAPABILITY_STYLES: dict[str, str] = {
    "read": "hactl.read",
    "write": "hactl.write",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=HACTL_THEME,
        no_color=no_color,
        highlight=False,
        emoji=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_capability(capability: str) -> str:
    """Return the Rich style name for a tool capability."""
    return _CAPABILITY_STYLES.get(capability, "")
