"""Tests for EngineService — engine calls wrapped as ServiceResults."""

from __future__ import annotations

import asyncio

import pytest

from lager.orchestrator import Lager
from lager.plugins.descriptor import PluginDescriptor
from lager.plugins.loader import LoadReport, PluginDiagnostic
from lager.services.engine import EngineService
from tests.conftest import make_plugin


@pytest.fixture
def engine_lager() -> Lager:
    lager = Lager({"environment": "DEV", "lagerIam": {"region": "eu-west-1"}})
    lager.register_plugin(
        PluginDescriptor(
            name="lager-iam",
            config={"region": "us-east-1", "retries": 3},
            extensions={"policy-name": lambda stage: f"policy-{stage}"},
        )
    )
    lager.register_plugin(make_plugin("node-lambda"))
    return lager


class TestListPlugins:
    def test_lists_in_execution_order(self, engine_lager: Lager) -> None:
        result = EngineService(engine_lager).list_plugins()
        assert result.ok
        assert result.op == "plugins"
        assert result.data["count"] == 2
        assert result.data["items"] == [
            {
                "name": "lager-iam",
                "config_key": "lagerIam",
                "hooks": [],
                "extensions": ["policy-name"],
            },
            {
                "name": "node-lambda",
                "config_key": "nodeLambda",
                "hooks": ["build"],
                "extensions": [],
            },
        ]
        assert result.warnings == []

    def test_missing_plugins_become_warnings(self, lager: Lager) -> None:
        report = LoadReport(
            missing=[PluginDiagnostic("lager-ghost", "not_found", "nowhere to be found")]
        )
        result = EngineService(lager, report).list_plugins()
        assert result.ok
        assert result.warnings == ["plugin 'lager-ghost' not loaded: nowhere to be found"]


class TestGetPlugin:
    def test_found(self, engine_lager: Lager) -> None:
        result = EngineService(engine_lager).get_plugin("lager-iam")
        assert result.ok
        assert result.data["config"] == {"region": "eu-west-1", "retries": 3}

    def test_not_found(self, engine_lager: Lager) -> None:
        result = EngineService(engine_lager).get_plugin("ghost")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "PLUGIN_NOT_FOUND"
        assert result.error.detail == {"name": "ghost"}


class TestGetConfig:
    def test_dotted_key(self, engine_lager: Lager) -> None:
        result = EngineService(engine_lager).get_config("lagerIam.region")
        assert result.data == {"key": "lagerIam.region", "value": "eu-west-1"}

    def test_whole_config(self, engine_lager: Lager) -> None:
        result = EngineService(engine_lager).get_config()
        assert result.ok
        assert result.data["key"] is None
        assert result.data["value"]["environment"] == "DEV"
        assert result.data["value"]["nodeLambda"] == {}
        assert type(result.data["value"]["lagerIam"]) is dict

    def test_missing_key(self, engine_lager: Lager) -> None:
        result = EngineService(engine_lager).get_config("environment.region")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CONFIG_NOT_FOUND"

    def test_stored_none_is_found(self) -> None:
        result = EngineService(Lager({"role": None})).get_config("role")
        assert result.ok
        assert result.data["value"] is None


class TestFire:
    @pytest.mark.asyncio
    async def test_success(self, engine_lager: Lager) -> None:
        result = await EngineService(engine_lager).fire("build", ["x", "DEV"])
        assert result.ok
        assert result.data == {
            "event": "build",
            "args": ["x-node-lambda", "DEV"],
            "handled_by": ["node-lambda"],
        }

    @pytest.mark.asyncio
    async def test_handler_failure(self, lager: Lager) -> None:
        def fail(value: str) -> tuple[str]:
            raise RuntimeError("stack is in UPDATE_ROLLBACK_FAILED")

        lager.register_plugin(PluginDescriptor(name="cfn", hooks={"deploy": fail}))
        result = await EngineService(lager).fire("deploy", ["x"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "HOOK_FAILED"
        assert result.error.message == "stack is in UPDATE_ROLLBACK_FAILED"
        assert result.error.detail == {"event": "deploy", "type": "RuntimeError"}

    @pytest.mark.asyncio
    async def test_contract_violation(self, lager: Lager) -> None:
        lager.register_plugin(PluginDescriptor(name="bad", hooks={"deploy": lambda v: ()}))
        result = await EngineService(lager).fire("deploy", ["x"])
        assert result.error is not None
        assert result.error.code == "HOOK_CONTRACT"
        assert result.error.detail["plugin"] == "bad"

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        async def stall(value: str) -> tuple[str]:
            await asyncio.sleep(5)
            return (value,)

        lager = Lager(hook_timeout=0.01)
        lager.register_plugin(PluginDescriptor(name="slow", hooks={"deploy": stall}))
        result = await EngineService(lager).fire("deploy", ["x"])
        assert result.error is not None
        assert result.error.code == "HOOK_TIMEOUT"

    @pytest.mark.asyncio
    async def test_unserializable_args_are_rendered(self, lager: Lager) -> None:
        marker = object()
        result = await EngineService(lager).fire("deploy", [marker])
        assert result.data["args"] == [repr(marker)]


class TestCall:
    @pytest.mark.asyncio
    async def test_registered_extension(self, engine_lager: Lager) -> None:
        result = await EngineService(engine_lager).call("lager-iam:policy-name", ["v0"])
        assert result.data == {
            "key": "lager-iam:policy-name",
            "result": "policy-v0",
            "passthrough": False,
        }

    @pytest.mark.asyncio
    async def test_passthrough(self, engine_lager: Lager) -> None:
        result = await EngineService(engine_lager).call("lager-iam:missing", ["a", "b"])
        assert result.data["result"] == "b"
        assert result.data["passthrough"] is True

    @pytest.mark.asyncio
    async def test_extension_failure(self, lager: Lager) -> None:
        def fail() -> None:
            raise PermissionError("AccessDenied")

        lager.register_plugin(PluginDescriptor(name="iam", extensions={"attach": fail}))
        result = await EngineService(lager).call("iam:attach", [])
        assert result.error is not None
        assert result.error.code == "EXTENSION_FAILED"
        assert result.error.detail == {"key": "iam:attach", "type": "PermissionError"}
