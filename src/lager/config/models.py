"""Pydantic model of a lager.toml project file.

Sparse TOML contract: every key is optional. A project typically lists its
plugins and a ``[config]`` table; plugin sections inside ``[config]`` are
keyed by the camel-cased plugin name::

    plugins = ["lager-iam", "node-lambda"]

    [config]
    environment = "DEV"
    stage = "v0"

    [config.lagerIam]
    region = "eu-west-1"
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, PositiveFloat


class ProjectConfig(BaseModel):
    """Root of lager.toml."""

    model_config = {"frozen": True}

    plugins: list[str] = Field(default_factory=list)
    hook_timeout: PositiveFloat | None = None
    config: dict[str, Any] = Field(default_factory=dict)
