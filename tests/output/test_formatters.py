"""Tests for the format_result dispatcher and OutputSettings."""

import json

from lager.output.formatters import OutputSettings, format_result
from lager.services.result import ServiceResult


def _ok(op: str = "config", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "fire", msg: str = "fail", **detail: object) -> ServiceResult:
    return ServiceResult.failure(op, "HOOK_FAILED", msg, **detail)


def _plugins(*names: str) -> ServiceResult:
    items = [
        {"name": n, "config_key": n, "hooks": ["build", "deploy"], "extensions": ["x"]}
        for n in names
    ]
    return _ok("plugins", count=len(items), items=items)


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        settings = OutputSettings(json_output=True)
        output = format_result(_ok(key="stage", value="v0"), settings=settings)
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "config"
        assert data["data"] == {"key": "stage", "value": "v0"}

    def test_json_mode_error(self) -> None:
        output = format_result(_err(msg="Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["code"] == "HOOK_FAILED"
        assert data["error"]["message"] == "Bad"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_ok(), settings=settings))["ok"] is True


class TestFormatResultQuiet:
    def test_ok(self) -> None:
        assert format_result(_ok("fire"), settings=OutputSettings(quiet=True)) == "OK: fire"

    def test_error(self) -> None:
        output = format_result(_err(msg="boom"), settings=OutputSettings(quiet=True))
        assert output == "ERROR: fire — boom"

    def test_plugins_prints_names_only(self) -> None:
        output = format_result(_plugins("iam", "lambda"), settings=OutputSettings(quiet=True))
        assert output.splitlines() == ["iam", "lambda"]


class TestFormatResultRich:
    def test_fields(self) -> None:
        output = format_result(_ok("fire", event="build", args=["x-A", {"stage": "v0"}]))
        assert "OK" in output
        assert "fire" in output
        assert "event: build" in output
        assert 'args: ["x-A",{"stage":"v0"}]' in output

    def test_plugins_table(self) -> None:
        output = format_result(_plugins("lager-iam"))
        assert "Name" in output
        assert "lager-iam" in output
        assert "build, deploy" in output

    def test_no_plugins(self) -> None:
        assert "No plugins registered" in format_result(_plugins())

    def test_error_hides_detail_by_default(self) -> None:
        output = format_result(_err(msg="boom", event="deploy"))
        assert "ERROR" in output
        assert "boom" in output
        assert "event" not in output

    def test_error_detail_when_verbose(self) -> None:
        output = format_result(
            _err(msg="boom", event="deploy"), settings=OutputSettings(verbose=True)
        )
        assert "event: deploy" in output

    def test_no_ansi_codes(self) -> None:
        assert "\x1b" not in format_result(_plugins("iam"))
