"""The Lager orchestrator: plugin registry, config store, hooks and extensions.

One :class:`Lager` is created per process (or per test) and passed to
whatever needs it. Plugins implement hooks to transform the arguments of
named events and expose extensions other plugins can call by key; a plugin
can define its own events, so plugins can be extended by other plugins.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from lager.config.store import ConfigStore
from lager.errors import InvalidPluginError
from lager.plugins.descriptor import PluginDescriptor
from lager.plugins.dispatcher import HookContext, HookDispatcher
from lager.plugins.extensions import ExtensionResolver
from lager.plugins.registry import PluginRegistry

AFTER_INIT = "after_init"

logger = logging.getLogger(__name__)


class Lager:
    """Plugin orchestration engine.

    Parameters:
        config: Project config mapping that seeds the config store. Plugin
            overrides are read from it at the plugin's camel-cased name.
        hook_timeout: Seconds a single hook handler may take, or None.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        hook_timeout: float | None = None,
    ) -> None:
        self._store = ConfigStore(config)
        self._registry = PluginRegistry(self._store)
        self._extensions = ExtensionResolver()
        self._dispatcher = HookDispatcher(self._registry, timeout=hook_timeout)

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def register_plugin(self, plugin: object) -> Lager:
        """Register *plugin* (descriptor, mapping or module). Returns self.

        Raises:
            InvalidPluginError: The plugin has no name.
            DuplicatePluginError: The name is already registered.
        """
        descriptor = self._registry.add(plugin)
        descriptor.lager = self
        self._extensions.add_plugin(descriptor)
        return self

    def get_plugin(self, name: str) -> PluginDescriptor:
        """Return the plugin named *name*. Raises :class:`PluginNotFoundError`."""
        return self._registry.get(name)

    def is_plugin_registered(self, name: str) -> bool:
        return self._registry.contains(name)

    @property
    def plugins(self) -> list[PluginDescriptor]:
        """Registered plugins in execution order."""
        return list(self._registry)

    def plugin_names(self) -> list[str]:
        return self._registry.names()

    async def init(self, plugins: Iterable[object]) -> Lager:
        """Register *plugins* in order, then fire ``after_init``.

        A plugin that cannot be registered is logged and skipped so one
        broken plugin does not prevent the others from starting.
        """
        for plugin in plugins:
            try:
                self.register_plugin(plugin)
            except InvalidPluginError as exc:
                logger.warning("Skipping plugin: %s", exc)
        await self.fire(AFTER_INIT)
        return self

    # ------------------------------------------------------------------
    # Hooks and extensions
    # ------------------------------------------------------------------

    async def fire(self, event: str, *args: Any) -> tuple[Any, ...]:
        """Fire a hook and return its arguments as transformed by plugins.

        Handlers run one at a time in registration order; the first one
        that raises aborts the chain with its exception.
        """
        return await self._dispatcher.fire(event, *args)

    async def fire_context(self, event: str, *args: Any) -> HookContext:
        """Like :meth:`fire` but return the full hook context."""
        return await self._dispatcher.dispatch(HookContext(event, args))

    async def call(self, key: str, *args: Any) -> Any:
        """Call the extension ``"<plugin>:<extension>"``.

        Without such an extension, the last argument is returned unchanged.
        """
        return await self._extensions.call(key, *args)

    def has_extension(self, key: str) -> bool:
        return self._extensions.has(key)

    def extension_keys(self) -> list[str]:
        return self._extensions.keys()

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def get_config(self, key: str | None = None, default: Any = None) -> Any:
        """Read the config at dotted *key*; the whole config when omitted.

        Never raises: missing paths return *default*.
        """
        return self._store.get(key, default)

    def listeners(self, event: str) -> list[str]:
        """Names of plugins implementing *event*, in execution order."""
        return [plugin.name for plugin in self._registry.listeners(event)]
