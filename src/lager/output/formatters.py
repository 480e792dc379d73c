"""Format a ServiceResult for the terminal.

Three modes: JSON (``--json``), quiet (``-q``), and Rich-rendered human
output. The ``plugins`` result renders as a table; everything else as
indented key-value pairs.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from lager.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from lager.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output mode flags taken from the global CLI options."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _render_quiet(result)

    console = create_console()
    if result.ok:
        _status_line(console, result)
        if result.op == "plugins":
            _render_plugins(console, result.data)
        else:
            _render_fields(console, result.data)
    else:
        _render_error(console, result, verbose=settings.verbose)
    return get_output(console).rstrip("\n")


def _render_quiet(result: ServiceResult) -> str:
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "plugins":
        return "\n".join(item["name"] for item in result.data.get("items", []))
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "lager.ok"), "  ", (result.op, "lager.op")))


def _dump(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return str(value)


def _render_fields(console: Console, data: dict[str, Any]) -> None:
    for key, value in data.items():
        console.print(Text.assemble((f"  {key}: ", "lager.key"), _dump(value)))


def _render_plugins(console: Console, data: dict[str, Any]) -> None:
    items = data.get("items", [])
    if not items:
        console.print("  No plugins registered")
        return
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Name", style="lager.name")
    table.add_column("Config key")
    table.add_column("Hooks")
    table.add_column("Extensions")
    for item in items:
        table.add_row(
            item["name"],
            item["config_key"],
            ", ".join(item["hooks"]),
            ", ".join(item["extensions"]),
        )
    console.print(table)


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(Text.assemble(("ERROR", "lager.error"), f"  {result.op} — {msg}"))
    if verbose and result.error and result.error.detail:
        for key, value in result.error.detail.items():
            console.print(Text.assemble((f"  {key}: ", "lager.key"), _dump(value)))
