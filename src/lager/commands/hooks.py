"""Commands: fire a hook and call an extension by hand.

Arguments are passed as strings unless ``--json-args`` is given, in which
case each one is decoded as a JSON value.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from lager.commands._base import LagerCommand

if TYPE_CHECKING:
    from lager.commands._context import AppContext


def _decode(values: tuple[str, ...], json_args: bool) -> list[Any]:
    if not json_args:
        return list(values)
    decoded = []
    for value in values:
        try:
            decoded.append(json.loads(value))
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"{value!r} is not valid JSON", param_hint="ARGS") from exc
    return decoded


@click.command(
    cls=LagerCommand,
    examples="""\
  lager fire after_deploy
  lager fire before_deploy_policy my-policy DEV
  lager fire --json-args resolve_stage '{"stage": "v0"}'""",
)
@click.argument("event")
@click.argument("args", nargs=-1)
@click.option("--json-args", is_flag=True, help="Decode each ARG as JSON.")
@click.pass_obj
def fire(app: AppContext, event: str, args: tuple[str, ...], json_args: bool) -> None:
    """Fire EVENT with ARGS and print the arguments returned by the plugins."""
    values = _decode(args, json_args)
    app.emit(app.run(lambda svc: svc.fire(event, values)))


@click.command(
    cls=LagerCommand,
    examples="""\
  lager call lager-iam:list-policies
  lager call --json-args node-lambda:memory 128""",
)
@click.argument("key")
@click.argument("args", nargs=-1)
@click.option("--json-args", is_flag=True, help="Decode each ARG as JSON.")
@click.pass_obj
def call(app: AppContext, key: str, args: tuple[str, ...], json_args: bool) -> None:
    """Call the extension KEY ("<plugin>:<extension>") with ARGS."""
    values = _decode(args, json_args)
    app.emit(app.run(lambda svc: svc.call(key, values)))
