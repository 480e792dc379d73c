"""AppContext — state shared by every lager command.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Owns the process's Lager instance: plugins are loaded
and the engine initialized lazily, on the first command that needs it, so
``--help`` and ``--version`` never import plugin code.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import click

from lager.output.formatters import OutputSettings, format_result
from lager.services.result import ServiceResult

if TYPE_CHECKING:
    from lager.config.settings import LagerSettings
    from lager.orchestrator import Lager
    from lager.plugins.loader import LoadReport
    from lager.services.engine import EngineService

EngineOp = Callable[["EngineService"], "Awaitable[ServiceResult] | ServiceResult"]


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: LagerSettings) -> None:
        self.settings = settings
        self._lager: Lager | None = None
        self._report: LoadReport | None = None

        from lager.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from lager.plugins.dispatcher import enable_hook_tracing

            enable_hook_tracing()

    async def engine(self) -> EngineService:
        """Load plugins and initialize the engine on first use."""
        from lager.orchestrator import Lager
        from lager.plugins.loader import PluginLoader
        from lager.services.engine import EngineService

        if self._lager is None:
            project = self.settings.project()
            report = PluginLoader(self.settings.project_root).load(project.plugins)
            lager = Lager(project.config, hook_timeout=project.hook_timeout)
            await lager.init(report.descriptors)
            self._lager, self._report = lager, report
        return EngineService(self._lager, self._report)

    def run(self, op: EngineOp) -> ServiceResult:
        """Run *op* against the engine inside one event loop."""

        async def main() -> ServiceResult:
            try:
                svc = await self.engine()
            except Exception as exc:
                return ServiceResult.failure(
                    "init", "INIT_FAILED", str(exc), type=exc.__class__.__name__
                )
            result = op(svc)
            if inspect.isawaitable(result):
                result = await result
            return result

        return asyncio.run(main())

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed.

        Successful output goes to stdout and its warnings to stderr (JSON
        output already carries them). A failure is printed to stderr only.
        """
        settings = self.output_settings
        text = format_result(result, settings=settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
