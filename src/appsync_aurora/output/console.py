"""Rich Console factory and theme for appsync-aurora output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

APPSYNC_THEME = Theme(
    {
        "appsync.ok": "bold green",
        "appsync.error": "bold red",
        "appsync.warning": "bold yellow",
        "appsync.op": "bold cyan",
        "appsync.key": "dim",
        "appsync.id": "bold blue",
        "appsync.path": "dim",
        "appsync.sql": "magenta",
        "appsync.type.query": "green",
        "appsync.type.mutation": "yellow",
    }
)

_TYPE_STYLES: dict[str, str] = {
    "Query": "appsync.type.query",
    "Mutation": "appsync.type.mutation",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=APPSYNC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(type_name: str) -> str:
    """Return the Rich style name for a GraphQL parent type."""
    return _TYPE_STYLES.get(type_name, "")
