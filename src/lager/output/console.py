"""Rich consoles for rendering results to text.

Formatters return ``str``, so every console writes into a StringIO buffer;
since that buffer is not a terminal, Rich emits no color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LAGER_THEME = Theme(
    {
        "lager.ok": "bold green",
        "lager.error": "bold red",
        "lager.warning": "bold yellow",
        "lager.op": "bold cyan",
        "lager.key": "dim",
        "lager.name": "bold blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=LAGER_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
