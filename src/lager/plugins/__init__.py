"""Plugin system: descriptors, registry, hook dispatch, extensions, loading.

Discovery: ``lager.plugins`` entry points (via pluggy), importable modules,
and project-local files, see :mod:`lager.plugins.loader`.
INVARIANT: Hook handlers run strictly one after another, in registration order.
"""

from lager.plugins.descriptor import PluginDescriptor, camel_case, coerce_descriptor
from lager.plugins.dispatcher import HookContext, HookDispatcher
from lager.plugins.extensions import ExtensionResolver
from lager.plugins.hookspecs import hookimpl
from lager.plugins.loader import LoadReport, PluginDiagnostic, PluginLoader
from lager.plugins.registry import PluginRegistry

__all__ = [
    "ExtensionResolver",
    "HookContext",
    "HookDispatcher",
    "LoadReport",
    "PluginDescriptor",
    "PluginDiagnostic",
    "PluginLoader",
    "PluginRegistry",
    "camel_case",
    "coerce_descriptor",
    "hookimpl",
]
