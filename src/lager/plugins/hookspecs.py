"""Pluggy hook specification used to discover plugin descriptors.

An installed package (``lager.plugins`` entry point) or a plugin module can
implement :meth:`LagerPluginSpec.lager_plugin` to hand its descriptor to
the loader::

    import pluggy

    hookimpl = pluggy.HookimplMarker("lager")

    @hookimpl
    def lager_plugin():
        return {"name": "iam", "hooks": {...}}

Modules without the hookimpl are read through their ``plugin`` attribute,
or as a descriptor themselves.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "lager"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class LagerPluginSpec:
    """Setup-time hooks for plugin discovery."""

    @hookspec(firstresult=True)
    def lager_plugin(self) -> object:
        """Return a plugin descriptor, mapping, or descriptor-like object."""
