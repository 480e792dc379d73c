"""Ordered plugin registry.

Registration order is execution order: the hook dispatcher walks the
registry front to back. Each registration also merges the project's config
override for the plugin into the config store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from lager.errors import DuplicatePluginError, PluginNotFoundError
from lager.plugins.descriptor import PluginDescriptor, coerce_descriptor

if TYPE_CHECKING:
    from lager.config.store import ConfigStore

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Holds plugin descriptors in registration order."""

    def __init__(self, store: ConfigStore) -> None:
        self._store = store
        self._plugins: list[PluginDescriptor] = []

    def add(self, plugin: object) -> PluginDescriptor:
        """Validate, configure, and append a plugin. Returns its descriptor.

        The project section at the plugin's camel-cased name is shallow-merged
        over the plugin defaults (project values win) and stored back under
        that key.

        Raises:
            InvalidPluginError: The plugin has no name.
            DuplicatePluginError: A plugin with that name is registered.
        """
        descriptor = coerce_descriptor(plugin)
        if self.contains(descriptor.name):
            raise DuplicatePluginError(descriptor.name)

        key = descriptor.config_key
        override = self._store._section(key)
        merged = dict(descriptor.config)
        if isinstance(override, Mapping):
            merged.update(override)
        elif override is not None:
            logger.warning(
                "Ignoring non-table config %r for plugin %s",
                key,
                descriptor.name,
            )
        descriptor.config = merged
        self._store._set_section(key, merged)

        self._plugins.append(descriptor)
        logger.debug("Registered plugin: %s", descriptor.name)
        return descriptor

    def get(self, name: str) -> PluginDescriptor:
        """Return the first plugin named *name*.

        Raises:
            PluginNotFoundError: No plugin has that name.
        """
        for plugin in self._plugins:
            if plugin.name == name:
                return plugin
        raise PluginNotFoundError(name)

    def contains(self, name: str) -> bool:
        return any(plugin.name == name for plugin in self._plugins)

    def names(self) -> list[str]:
        return [plugin.name for plugin in self._plugins]

    def listeners(self, event: str) -> list[PluginDescriptor]:
        """Plugins implementing *event*, in execution order."""
        return [plugin for plugin in self._plugins if plugin.implements(event)]

    def __getitem__(self, index: int) -> PluginDescriptor:
        return self._plugins[index]

    def __iter__(self) -> Iterator[PluginDescriptor]:
        return iter(list(self._plugins))

    def __len__(self) -> int:
        return len(self._plugins)
