"""Plugin descriptor: the record a plugin hands to the engine.

A plugin is a name plus three optional mappings: hook handlers keyed by
event name, extension callables keyed by extension name, and default config.
Plugins may be written as a :class:`PluginDescriptor`, a plain mapping with
the same keys, or a module exposing the keys as attributes.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from lager.errors import InvalidPluginError

if TYPE_CHECKING:
    from lager.orchestrator import Lager

HookHandler = Callable[..., Awaitable[tuple[Any, ...]] | tuple[Any, ...]]
Extension = Callable[..., Any]

_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+\d*|[A-Z]+\d*|\d+")


@dataclass(eq=False)
class PluginDescriptor:
    """A registered unit of hooks, extensions, and config defaults.

    Attributes:
        name: Unique plugin identifier. Required.
        hooks: Event name -> handler. A handler receives the current
            arguments unpacked and returns (or resolves to) a tuple of the
            same length.
        extensions: Extension name -> callable, addressed as
            ``"<name>:<extension>"``.
        config: Default config. Replaced by the merged config on registration.
        lager: The orchestrator this plugin is registered with.
    """

    name: str
    hooks: dict[str, HookHandler] = field(default_factory=dict)
    extensions: dict[str, Extension] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)
    lager: Lager | None = field(default=None, repr=False)

    @property
    def config_key(self) -> str:
        """Key of this plugin's section in the config store."""
        return camel_case(self.name)

    def implements(self, event: str) -> bool:
        return event in self.hooks


def camel_case(name: str) -> str:
    """Convert *name* to camelCase the way lodash does.

    ``lager-iam`` -> ``lagerIam``, ``node_lambda`` -> ``nodeLambda``,
    ``APIGateway`` -> ``apiGateway``.
    """
    words = _WORD_RE.findall(name)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in tail)


def coerce_descriptor(obj: object) -> PluginDescriptor:
    """Build a :class:`PluginDescriptor` from a descriptor, mapping, or module.

    Raises:
        InvalidPluginError: *obj* has no usable ``name``, or one of its
            mappings has the wrong type.
    """
    if isinstance(obj, PluginDescriptor):
        if not obj.name:
            raise InvalidPluginError("A lager plugin MUST have a name property")
        return obj

    if isinstance(obj, Mapping):
        fields = dict(obj)
    else:
        fields = {
            key: getattr(obj, key)
            for key in ("name", "hooks", "extensions", "config")
            if hasattr(obj, key)
        }

    name = fields.get("name")
    if not name or not isinstance(name, str):
        raise InvalidPluginError("A lager plugin MUST have a name property")

    kwargs: dict[str, Any] = {"name": name}
    for key in ("hooks", "extensions", "config"):
        value = fields.get(key)
        if value is None:
            continue
        if not isinstance(value, Mapping):
            msg = f'Plugin "{name}" has a non-mapping "{key}" ({type(value).__name__})'
            raise InvalidPluginError(msg)
        kwargs[key] = dict(value)
    return PluginDescriptor(**kwargs)
