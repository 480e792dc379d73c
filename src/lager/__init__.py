"""lager — extensible deployment CLI built on a plugin orchestration engine."""

from lager.errors import (
    DuplicatePluginError,
    HookContractError,
    HookTimeoutError,
    InvalidPluginError,
    LagerError,
    PluginNotFoundError,
)
from lager.orchestrator import AFTER_INIT, Lager
from lager.plugins.descriptor import PluginDescriptor

__version__ = "0.1.0"

__all__ = [
    "AFTER_INIT",
    "DuplicatePluginError",
    "HookContractError",
    "HookTimeoutError",
    "InvalidPluginError",
    "Lager",
    "LagerError",
    "PluginDescriptor",
    "PluginNotFoundError",
    "__version__",
]
