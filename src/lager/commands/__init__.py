"""Subcommand modules for lager.

Provides register_commands() which uses deferred imports to keep
``lager --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the engine inspection commands on the root CLI group."""
    from lager.commands.config import config
    from lager.commands.hooks import call, fire
    from lager.commands.plugins import plugins

    cli.add_command(plugins)
    cli.add_command(config)
    cli.add_command(fire)
    cli.add_command(call)
