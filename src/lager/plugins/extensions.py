"""Extension lookup by ``"<plugin>:<extension>"`` key.

Calling a key nobody registered returns the last argument unchanged, so an
optional extension point can be called without checking for it first.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lager.plugins.descriptor import Extension, PluginDescriptor

logger = logging.getLogger(__name__)


class ExtensionResolver:
    """Maps namespaced extension keys to plugin callables."""

    def __init__(self) -> None:
        self._extensions: dict[str, Extension] = {}

    def add_plugin(self, plugin: PluginDescriptor) -> None:
        """Expose every extension of *plugin* under ``"<name>:<extension>"``."""
        for extension_name, fn in plugin.extensions.items():
            self._extensions[f"{plugin.name}:{extension_name}"] = fn

    def has(self, key: str) -> bool:
        return key in self._extensions

    def keys(self) -> list[str]:
        return list(self._extensions)

    async def call(self, key: str, *args: Any) -> Any:
        """Invoke the extension at *key*, or pass the last argument through.

        Exceptions raised by the extension propagate unchanged.
        """
        fn = self._extensions.get(key)
        if fn is None:
            logger.debug("No extension %s, passing through", key)
            return args[-1] if args else None

        result = fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
