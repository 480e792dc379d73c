"""Fixtures for command tests: a project with local plugins."""

from __future__ import annotations

from pathlib import Path

import pytest

_IAM_PLUGIN = """\
name = "lager-iam"
config = {"region": "us-east-1", "retries": 3}


async def _before_deploy(policy, stage):
    return (policy + "-iam", stage)


def _policy_name(stage):
    return "policy-" + stage


hooks = {"before_deploy": _before_deploy}
extensions = {"policy-name": _policy_name}
"""

_AUDIT_PLUGIN = """\
name = "audit"


def _before_deploy(policy, stage):
    if stage == "PROD":
        raise RuntimeError("deploys to PROD are frozen")
    return (policy + "-audited", stage)


hooks = {"before_deploy": _before_deploy}
"""

_PROJECT_TOML = """\
plugins = ["lager-iam", "audit", "lager-ghost"]

[config]
environment = "DEV"

[config.lagerIam]
region = "eu-west-1"
"""


@pytest.fixture
def plugin_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """CWD set to a project with two local plugins and one unresolvable id."""
    (tmp_path / "lager.toml").write_text(_PROJECT_TOML, encoding="utf-8")
    (tmp_path / "lager-iam.py").write_text(_IAM_PLUGIN, encoding="utf-8")
    (tmp_path / "audit.py").write_text(_AUDIT_PLUGIN, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path
