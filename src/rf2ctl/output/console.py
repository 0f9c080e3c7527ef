"""Rich Console factory and theme for rf2ctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RF2_THEME = Theme(
    {
        "rf2.ok": "bold green",
        "rf2.error": "bold red",
        "rf2.warning": "bold yellow",
        "rf2.op": "bold cyan",
        "rf2.key": "dim",
        "rf2.id": "bold blue",
        "rf2.hash": "magenta",
        "rf2.view.stated": "green",
        "rf2.view.inferred": "cyan",
    }
)

_VIEW_STYLES: dict[str, str] = {
    "stated": "rf2.view.stated",
    "inferred": "rf2.view.inferred",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=RF2_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_view(characteristic: str) -> str:
    """Return the Rich style name for a stated/inferred view."""
    return _VIEW_STYLES.get(characteristic, "")
