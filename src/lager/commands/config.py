"""Command: read the merged project and plugin config."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lager.commands._base import LagerCommand

if TYPE_CHECKING:
    from lager.commands._context import AppContext


@click.command(
    cls=LagerCommand,
    examples="""\
  lager config
  lager config environment
  lager config lagerIam.region""",
)
@click.argument("key", required=False)
@click.pass_obj
def config(app: AppContext, key: str | None) -> None:
    """Show the config value at a dotted KEY, or the whole config."""
    app.emit(app.run(lambda svc: svc.get_config(key)))
