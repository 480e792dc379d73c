"""Layered settings for the lager CLI.

Sources, highest priority first:

1. CLI flags, passed to :meth:`LagerSettings.from_cli` (None means unset)
2. ``LAGER_*`` environment variables; ``__`` reaches into tables, e.g.
   ``LAGER_CONFIG__ENVIRONMENT=PROD``
3. the project ``lager.toml`` (see :mod:`lager.config.discovery`)
4. field defaults
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field, PositiveFloat, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from lager.config.discovery import find_config, load_config
from lager.config.models import ProjectConfig

# Project file for the settings object currently being built.
_project_file: ContextVar[Path | None] = ContextVar("lager_project_file", default=None)


def _validated(path: Path) -> dict[str, Any]:
    try:
        project = load_config(path)
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
    except ValidationError as exc:
        raise click.ClickException(f"Invalid project file {path}: {exc}") from exc
    return project.model_dump(exclude_unset=True)


class ProjectFileSource(PydanticBaseSettingsSource):
    """Settings source backed by the project's ``lager.toml``.

    The file is validated as a :class:`ProjectConfig` first, so unknown
    top-level keys are dropped and bad values fail before settings merge.
    """

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self.path = path
        self._table: dict[str, Any] = {}
        if path is not None and path.is_file():
            self._table = _validated(path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._table.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._table)


class LagerSettings(BaseSettings):
    """Everything a CLI invocation needs, merged and frozen.

    Attributes:
        project_root: Directory holding ``lager.toml`` (or CWD if none was
            found). Project-local plugins are looked up here.
        config_path: The TOML file in use, if any.
        plugins: Plugin identifiers, in execution order.
        config: Seed for the engine's config store.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "LAGER_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    plugins: list[str] = Field(default_factory=list)
    hook_timeout: PositiveFloat | None = None
    config: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            ProjectFileSource(settings_cls, _project_file.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> LagerSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is treated as no
        project file. Without one, ``lager.toml`` is discovered by walking
        up from *project_root* (or the CWD), and the project root becomes
        the directory it was found in.
        """
        if config_path:
            candidate = Path(config_path)
            project_file = candidate if candidate.is_file() else None
        else:
            project_file = find_config(project_root)

        if project_root is None:
            project_root = project_file.parent if project_file else Path.cwd()

        overrides = {key: value for key, value in cli_flags.items() if value is not None}
        token = _project_file.set(project_file)
        try:
            return cls(project_root=project_root, config_path=project_file, **overrides)
        finally:
            _project_file.reset(token)

    def project(self) -> ProjectConfig:
        """The ``lager.toml`` part of the settings."""
        return ProjectConfig(
            plugins=self.plugins,
            hook_timeout=self.hook_timeout,
            config=self.config,
        )
