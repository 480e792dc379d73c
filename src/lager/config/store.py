"""In-memory config store with dotted key-path lookup.

The store is seeded once from the project ``[config]`` table. Plugin
registration is the only writer: it replaces the section stored under the
plugin's config key with a copy of the merged plugin config.

Reads never hand out the store's own containers. Tables come back as
read-only mapping proxies (all the way down) and lists as copies.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


def _read_only(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _read_only(item) for key, item in value.items()})
    if isinstance(value, list):
        return [_read_only(item) for item in value]
    return value


class ConfigStore:
    """Nested mapping read through ``"a.b.c"`` style keys."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """Return the value at *key*, or the whole config when *key* is None.

        Missing segments and non-mapping intermediates resolve to *default*.
        """
        if key is None:
            return _read_only(self._data)

        part: Any = self._data
        for segment in key.split("."):
            if not isinstance(part, Mapping) or segment not in part:
                return default
            part = part[segment]
        return _read_only(part)

    def __contains__(self, key: str) -> bool:
        marker = object()
        return self.get(key, marker) is not marker

    def _section(self, key: str) -> Any:
        return self._data.get(key)

    def _set_section(self, key: str, value: Mapping[str, Any]) -> None:
        self._data[key] = copy.deepcopy(dict(value))
