"""Locating and reading ``lager.toml``.

The project file is found the way git finds ``.git/``: the nearest
``lager.toml`` in the start directory or one of its parents. Setting
``LAGER_CONFIG_FILE`` replaces the search; ``--config`` replaces both.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from lager.config.models import ProjectConfig

CONFIG_FILENAME = "lager.toml"
CONFIG_ENV_VAR = "LAGER_CONFIG_FILE"


def find_config(start: Path | None = None) -> Path | None:
    """Return the project file for *start* (default: CWD), or None.

    A ``LAGER_CONFIG_FILE`` naming a missing file yields None instead of
    falling back to the search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> ProjectConfig:
    """Validate a project file into a :class:`ProjectConfig`.

    The file is discovered from *cwd* when *path* is omitted; no file at
    all gives an empty project.

    Raises:
        tomllib.TOMLDecodeError: The file is not valid TOML.
        pydantic.ValidationError: A known key has the wrong type.
    """
    path = path or find_config(cwd)
    if path is None:
        return ProjectConfig()
    with path.open("rb") as fh:
        return ProjectConfig.model_validate(tomllib.load(fh))
