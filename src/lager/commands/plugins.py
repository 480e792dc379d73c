"""Command: list registered plugins."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lager.commands._base import LagerCommand

if TYPE_CHECKING:
    from lager.commands._context import AppContext


@click.command(
    cls=LagerCommand,
    examples="""\
  lager plugins
  lager plugins lager-iam
  lager --json plugins""",
)
@click.argument("name", required=False)
@click.pass_obj
def plugins(app: AppContext, name: str | None) -> None:
    """List registered plugins in execution order, or show one plugin."""
    if name is None:
        app.emit(app.run(lambda svc: svc.list_plugins()))
    else:
        app.emit(app.run(lambda svc: svc.get_plugin(name)))
