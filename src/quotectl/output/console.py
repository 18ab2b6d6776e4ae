"""Rich Console factory and theme for quotectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

QUOTE_THEME = Theme(
    {
        "quote.ok": "bold green",
        "quote.error": "bold red",
        "quote.warning": "bold yellow",
        "quote.op": "bold cyan",
        "quote.key": "dim",
        "quote.id": "bold blue",
        "quote.name": "bold",
        "quote.money": "green",
        "quote.total": "bold green",
        "quote.savings": "magenta",
        "quote.free": "italic green",
        "quote.bucket.one_time": "cyan",
        "quote.bucket.monthly": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=QUOTE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console was not created by create_console()")
    return buffer.getvalue()


def style_for_bucket(bucket: str) -> str:
    """Theme style for a billing bucket name; unknown buckets are unstyled."""
    style = f"quote.bucket.{bucket}"
    return style if style in QUOTE_THEME.styles else ""
