"""Shared pytest fixtures and test helpers for lager tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from lager.orchestrator import Lager
from lager.plugins.descriptor import PluginDescriptor
from lager.plugins.dispatcher import enable_hook_tracing


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LAGER_* environment out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("LAGER_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo the root handlers and levels configure_logging installs."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    lager_level = logging.getLogger("lager").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("lager").setLevel(lager_level)
    enable_hook_tracing(False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def lager() -> Lager:
    """A fresh orchestrator with an empty config."""
    return Lager()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory holding a minimal lager.toml."""
    (tmp_path / "lager.toml").write_text(
        '[config]\nenvironment = "DEV"\nstage = "v0"\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI discovers its lager.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.chdir(project_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def suffix_hook(suffix: str, calls: list[str] | None = None) -> Callable[..., Any]:
    """Async hook appending *suffix* to the first argument."""

    async def hook(value: str, *rest: Any) -> tuple[Any, ...]:
        if calls is not None:
            calls.append(suffix)
        return (value + suffix, *rest)

    return hook


def make_plugin(
    name: str,
    event: str = "build",
    suffix: str | None = None,
    **kwargs: Any,
) -> PluginDescriptor:
    """Plugin whose *event* hook appends *suffix* (default ``-<name>``)."""
    hooks = kwargs.pop("hooks", {event: suffix_hook(suffix or f"-{name}")})
    return PluginDescriptor(name=name, hooks=hooks, **kwargs)
