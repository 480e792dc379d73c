"""Root CLI group for lager with global flags and command registration."""

from __future__ import annotations

import click

from lager import __version__
from lager.commands import register_commands
from lager.commands._context import AppContext
from lager.config.settings import LagerSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="lager")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override lager.toml path.")
@click.option(
    "--hook-timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds a single hook handler may run.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    hook_timeout: float | None,
) -> None:
    """lager — extensible deployment CLI."""
    settings = LagerSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        hook_timeout=hook_timeout,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
