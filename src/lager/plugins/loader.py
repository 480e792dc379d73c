"""Plugin loading: turn project plugin identifiers into descriptors.

Each identifier is resolved by the first strategy that finds it:

1. an installed ``lager.plugins`` entry point with that name (pluggy
   setuptools entry-point loading);
2. an importable module (``-`` normalized to ``_``);
3. a project-local ``<identifier>.py`` file or ``<identifier>/`` package.

INVARIANT: Loading never raises for a plugin problem. Every identifier ends
up either in ``LoadReport.loaded`` or, with a diagnostic, in
``LoadReport.missing``.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

import pluggy

from lager.errors import InvalidPluginError
from lager.plugins.descriptor import PluginDescriptor, coerce_descriptor
from lager.plugins.hookspecs import PROJECT_NAME, LagerPluginSpec

ENTRY_POINT_GROUP = "lager.plugins"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedPlugin:
    """An identifier that resolved to a descriptor."""

    identifier: str
    source: str
    descriptor: PluginDescriptor


@dataclass(frozen=True)
class PluginDiagnostic:
    """Why an identifier did not produce a descriptor.

    Attributes:
        identifier: The identifier from the project config.
        reason: ``not_found``, ``import_failed`` or ``invalid``.
        detail: Human-readable explanation.
        attempts: Locations tried, in order.
    """

    identifier: str
    reason: str
    detail: str
    attempts: tuple[str, ...] = ()


@dataclass
class LoadReport:
    loaded: list[LoadedPlugin] = field(default_factory=list)
    missing: list[PluginDiagnostic] = field(default_factory=list)

    @property
    def descriptors(self) -> list[PluginDescriptor]:
        return [item.descriptor for item in self.loaded]

    @property
    def ok(self) -> bool:
        return not self.missing


class _Failed(Exception):
    def __init__(self, reason: str, detail: str) -> None:
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


class PluginLoader:
    """Resolves plugin identifiers against entry points, modules and files.

    Parameters:
        project_root: Directory searched for project-local plugins.
    """

    def __init__(self, project_root: Path | None = None) -> None:
        self._root = project_root or Path.cwd()
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LagerPluginSpec)

    def load(self, identifiers: Iterable[str]) -> LoadReport:
        """Resolve every identifier, in order."""
        report = LoadReport()
        for identifier in identifiers:
            result = self.load_one(identifier)
            if isinstance(result, PluginDiagnostic):
                logger.warning(
                    "Lager could not load the plugin %r: %s",
                    identifier,
                    result.detail,
                )
                report.missing.append(result)
            else:
                report.loaded.append(result)
        return report

    def load_one(self, identifier: str) -> LoadedPlugin | PluginDiagnostic:
        attempts: list[str] = []
        strategies = (
            ("entry point", self._from_entry_point),
            ("module", self._from_module),
            ("project file", self._from_project),
        )
        try:
            for source, strategy in strategies:
                obj = strategy(identifier, attempts)
                if obj is None:
                    continue
                descriptor = self._extract(identifier, obj)
                logger.debug("Loaded plugin %s from %s", identifier, source)
                return LoadedPlugin(identifier, source, descriptor)
        except _Failed as exc:
            return PluginDiagnostic(identifier, exc.reason, exc.detail, tuple(attempts))

        return PluginDiagnostic(
            identifier,
            "not_found",
            f"no entry point, module or project file named {identifier!r}",
            tuple(attempts),
        )

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _from_entry_point(self, identifier: str, attempts: list[str]) -> object | None:
        attempts.append(f"entry point {ENTRY_POINT_GROUP}:{identifier}")
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP, name=identifier)
        except Exception as exc:
            raise _Failed("import_failed", f"entry point failed to load: {exc}") from exc
        return self._pm.get_plugin(identifier)

    def _from_module(self, identifier: str, attempts: list[str]) -> ModuleType | None:
        module_name = identifier.replace("-", "_")
        if not all(part.isidentifier() for part in module_name.split(".")):
            return None
        attempts.append(f"module {module_name}")
        try:
            if importlib.util.find_spec(module_name) is None:
                return None
        except ModuleNotFoundError:
            return None
        try:
            return importlib.import_module(module_name)
        except Exception as exc:
            raise _Failed("import_failed", f"module {module_name} failed to import: {exc}") from exc

    def _from_project(self, identifier: str, attempts: list[str]) -> ModuleType | None:
        """Load ``<root>/<identifier>.py`` or ``<root>/<identifier>/__init__.py``."""
        file_path = self._root / f"{identifier}.py"
        package_init = self._root / identifier / "__init__.py"
        attempts.extend([f"file {file_path}", f"package {package_init.parent}"])

        if file_path.is_file():
            path, search_locations = file_path, None
        elif package_init.is_file():
            path, search_locations = package_init, [str(package_init.parent)]
        else:
            return None

        module_name = "lager_local_plugin_" + re.sub(r"\W", "_", identifier)
        try:
            spec = importlib.util.spec_from_file_location(
                module_name, path, submodule_search_locations=search_locations
            )
            if spec is None or spec.loader is None:
                raise _Failed("import_failed", f"could not create module spec for {path}")
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
        except _Failed:
            raise
        except Exception as exc:
            sys.modules.pop(module_name, None)
            raise _Failed("import_failed", f"{path} failed to import: {exc}") from exc
        return module

    # ------------------------------------------------------------------
    # Descriptor extraction
    # ------------------------------------------------------------------

    def _extract(self, identifier: str, obj: object) -> PluginDescriptor:
        """Read a descriptor from a loaded object.

        Order: pluggy ``lager_plugin`` hookimpl, then a ``plugin``
        attribute, then the object itself.
        """
        if inspect.isclass(obj):
            try:
                obj = obj()
            except Exception as exc:
                raise _Failed("import_failed", f"could not instantiate {obj!r}: {exc}") from exc

        candidate = obj
        if self._has_hook_impls(obj):
            candidate = self._call_hook(identifier, obj)
        elif hasattr(obj, "plugin") and not hasattr(obj, "name"):
            candidate = obj.plugin  # type: ignore[attr-defined]

        try:
            return coerce_descriptor(candidate)
        except InvalidPluginError as exc:
            raise _Failed("invalid", str(exc)) from exc

    def _call_hook(self, identifier: str, obj: object) -> object:
        registered = self._pm.get_plugin(identifier)
        if registered is not obj:
            if registered is not None:
                self._pm.unregister(registered)
            try:
                self._pm.register(obj, name=identifier)
            except pluggy.PluginValidationError as exc:
                raise _Failed("invalid", str(exc)) from exc

        for impl in self._pm.hook.lager_plugin.get_hookimpls():
            if impl.plugin is obj:
                try:
                    return impl.function()
                except Exception as exc:
                    raise _Failed("invalid", f"lager_plugin() failed: {exc}") from exc
        raise _Failed("invalid", f"{identifier} has no lager_plugin implementation")

    @staticmethod
    def _has_hook_impls(obj: object) -> bool:
        """Whether *obj* carries a ``@hookimpl``-decorated ``lager_plugin``.

        Pluggy's ``HookimplMarker("lager")`` sets a ``lager_impl`` attribute
        on decorated functions.
        """
        fn = getattr(obj, "lager_plugin", None)
        return callable(fn) and getattr(fn, f"{PROJECT_NAME}_impl", None) is not None
