"""Exception hierarchy for the plugin orchestration engine.

Hook and extension failures are not wrapped: the handler's own exception
reaches the caller unchanged. The classes below cover the failures the
engine itself detects.
"""

from __future__ import annotations


class LagerError(Exception):
    """Base class for engine errors."""


class InvalidPluginError(LagerError):
    """A plugin descriptor cannot be registered."""


class DuplicatePluginError(InvalidPluginError):
    """A plugin with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f'A plugin named "{name}" is already registered')
        self.name = name


class PluginNotFoundError(LagerError, KeyError):
    """Lookup of a plugin name that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f'The plugin "{name}" is not registered in the Lager instance')
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class HookContractError(LagerError):
    """A hook handler returned arguments with a different shape."""

    def __init__(self, event: str, plugin: str, expected: int, got: object) -> None:
        detail = f"{len(got)} values" if isinstance(got, tuple | list) else type(got).__name__
        super().__init__(
            f'Hook "{event}" of plugin "{plugin}" must return {expected} values, got {detail}'
        )
        self.event = event
        self.plugin = plugin
        self.expected = expected


class HookTimeoutError(LagerError):
    """A hook handler did not settle within the configured timeout."""

    def __init__(self, event: str, plugin: str, timeout: float) -> None:
        super().__init__(f'Hook "{event}" of plugin "{plugin}" timed out after {timeout}s')
        self.event = event
        self.plugin = plugin
        self.timeout = timeout
