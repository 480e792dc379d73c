"""Hook dispatch: an async, strictly sequential fold over the registry.

Each plugin implementing the fired event receives the arguments produced by
the previous one and returns a replacement tuple of the same length. The
first handler that raises aborts the fold; its exception reaches the caller
unchanged.

Concurrent ``fire`` calls on the same registry are not coordinated. Within
one call, at most one handler runs at a time.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import structlog

from lager.errors import HookContractError, HookTimeoutError

if TYPE_CHECKING:
    from lager.plugins.descriptor import HookHandler, PluginDescriptor
    from lager.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

_P = ParamSpec("_P")
_R = TypeVar("_R")

_tracing: ContextVar[bool] = ContextVar("lager_hook_tracing", default=False)


def enable_hook_tracing(enabled: bool = True) -> None:
    """Turn per-dispatch ``hook.fire`` log records on or off."""
    _tracing.set(enabled)


@dataclass(frozen=True)
class HookContext:
    """The value threaded through one ``fire`` call.

    Attributes:
        event: Name of the fired event.
        args: Current arguments. Their count never changes during the fold.
        handled_by: Names of plugins whose handler ran, in order.
    """

    event: str
    args: tuple[Any, ...] = ()
    handled_by: tuple[str, ...] = ()

    def advance(self, plugin: str, result: object) -> HookContext:
        """Return the context after *plugin* produced *result*.

        Raises:
            HookContractError: *result* is not a tuple or list of the same length.
        """
        if not isinstance(result, tuple | list) or len(result) != len(self.args):
            raise HookContractError(self.event, plugin, len(self.args), result)
        return HookContext(self.event, tuple(result), (*self.handled_by, plugin))


def logged_dispatch(
    func: Callable[_P, Awaitable[_R]],
) -> Callable[_P, Awaitable[_R]]:
    """Log each dispatch with its listener count, duration and outcome.

    Only active after :func:`enable_hook_tracing`; the CLI enables it for
    ``--verbose``.
    """

    @functools.wraps(func)
    async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _tracing.get():
            return await func(*args, **kwargs)
        dispatcher: HookDispatcher = args[0]  # type: ignore[assignment]
        context: HookContext = args[1]  # type: ignore[assignment]
        log = structlog.get_logger("lager.hooks").bind(hook=context.event)
        listeners = len(dispatcher.registry.listeners(context.event))
        start = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception:
            log.debug(
                "hook.fire",
                listeners=listeners,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                ok=False,
            )
            raise
        log.debug(
            "hook.fire",
            listeners=listeners,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            ok=True,
        )
        return result

    return wrapper


class HookDispatcher:
    """Runs hook handlers of registered plugins in registration order.

    Parameters:
        registry: The registry to walk. Read live, so plugins registered by
            an earlier handler take part in the same fold.
        timeout: Seconds a single handler may take, or None for no limit.
    """

    def __init__(self, registry: PluginRegistry, *, timeout: float | None = None) -> None:
        self.registry = registry
        self.timeout = timeout

    async def fire(self, event: str, *args: Any) -> tuple[Any, ...]:
        """Fire *event* and return the arguments as transformed by all plugins."""
        context = await self.dispatch(HookContext(event, args))
        return context.args

    @logged_dispatch
    async def dispatch(self, context: HookContext) -> HookContext:
        i = 0
        while i < len(self.registry):
            plugin = self.registry[i]
            handler = plugin.hooks.get(context.event)
            if handler is not None:
                result = await self._invoke(plugin, handler, context)
                context = context.advance(plugin.name, result)
            i += 1
        return context

    async def _invoke(
        self,
        plugin: PluginDescriptor,
        handler: HookHandler,
        context: HookContext,
    ) -> object:
        try:
            result = handler(*context.args)
            if inspect.isawaitable(result):
                if self.timeout is None:
                    result = await result
                else:
                    result = await self._await_within(plugin, result, context)
        except Exception as exc:
            logger.warning(
                "Hook %s failed in plugin %s: %s",
                context.event,
                plugin.name,
                exc.__class__.__name__,
            )
            raise
        return result

    async def _await_within(
        self,
        plugin: PluginDescriptor,
        pending: Awaitable[object],
        context: HookContext,
    ) -> object:
        # Only an expired deadline becomes HookTimeoutError; a TimeoutError
        # raised by the handler itself propagates as is.
        try:
            async with asyncio.timeout(self.timeout) as deadline:
                return await pending
        except TimeoutError:
            if not deadline.expired():
                raise
            raise HookTimeoutError(context.event, plugin.name, self.timeout) from None
