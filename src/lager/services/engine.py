"""EngineService — CLI-facing operations over an initialized Lager.

Wraps engine calls into :class:`ServiceResult` so commands only format and
emit. Engine and plugin exceptions become failed results here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic_core import to_jsonable_python

from lager.errors import HookContractError, HookTimeoutError, PluginNotFoundError
from lager.services.result import ServiceResult

if TYPE_CHECKING:
    from lager.orchestrator import Lager
    from lager.plugins.loader import LoadReport


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(item) for item in value]
    return value


def _jsonable(value: Any) -> Any:
    return to_jsonable_python(_plain(value), fallback=repr)


class EngineService:
    """Read and drive the engine on behalf of CLI commands.

    Parameters:
        lager: The initialized orchestrator.
        report: Loader report from startup; unresolved plugins become warnings.
    """

    def __init__(self, lager: Lager, report: LoadReport | None = None) -> None:
        self._lager = lager
        self._report = report

    def _load_warnings(self) -> list[str]:
        if self._report is None:
            return []
        return [f"plugin {d.identifier!r} not loaded: {d.detail}" for d in self._report.missing]

    def list_plugins(self) -> ServiceResult:
        items = [
            {
                "name": plugin.name,
                "config_key": plugin.config_key,
                "hooks": sorted(plugin.hooks),
                "extensions": sorted(plugin.extensions),
            }
            for plugin in self._lager.plugins
        ]
        return ServiceResult(
            ok=True,
            op="plugins",
            data={"count": len(items), "items": items},
            warnings=self._load_warnings(),
        )

    def get_plugin(self, name: str) -> ServiceResult:
        try:
            plugin = self._lager.get_plugin(name)
        except PluginNotFoundError as exc:
            return ServiceResult.failure("plugin", "PLUGIN_NOT_FOUND", str(exc), name=name)
        return ServiceResult(
            ok=True,
            op="plugin",
            data={
                "name": plugin.name,
                "config_key": plugin.config_key,
                "hooks": sorted(plugin.hooks),
                "extensions": sorted(plugin.extensions),
                "config": _jsonable(plugin.config),
            },
        )

    def get_config(self, key: str | None = None) -> ServiceResult:
        missing = object()
        value = self._lager.get_config(key, missing)
        if value is missing:
            return ServiceResult.failure(
                "config", "CONFIG_NOT_FOUND", f"No config value at {key!r}", key=key
            )
        return ServiceResult(ok=True, op="config", data={"key": key, "value": _jsonable(value)})

    async def fire(self, event: str, args: list[Any]) -> ServiceResult:
        try:
            context = await self._lager.fire_context(event, *args)
        except HookContractError as exc:
            return ServiceResult.failure(
                "fire", "HOOK_CONTRACT", str(exc), event=event, plugin=exc.plugin
            )
        except HookTimeoutError as exc:
            return ServiceResult.failure(
                "fire", "HOOK_TIMEOUT", str(exc), event=event, plugin=exc.plugin
            )
        except Exception as exc:
            return ServiceResult.failure(
                "fire", "HOOK_FAILED", str(exc), event=event, type=exc.__class__.__name__
            )
        return ServiceResult(
            ok=True,
            op="fire",
            data={
                "event": event,
                "args": _jsonable(list(context.args)),
                "handled_by": list(context.handled_by),
            },
        )

    async def call(self, key: str, args: list[Any]) -> ServiceResult:
        registered = self._lager.has_extension(key)
        try:
            result = await self._lager.call(key, *args)
        except Exception as exc:
            return ServiceResult.failure(
                "call", "EXTENSION_FAILED", str(exc), key=key, type=exc.__class__.__name__
            )
        return ServiceResult(
            ok=True,
            op="call",
            data={"key": key, "result": _jsonable(result), "passthrough": not registered},
        )
