"""Tests for the format_result dispatcher and OutputSettings."""

import json

from pathctl.output.formatters import OutputSettings, format_result
from pathctl.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="ERR", message=msg),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        result = _ok("connect", edge={"id": 1, "origin_id": 1, "destination_id": 2})
        output = format_result(result, settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "connect"
        assert data["data"]["edge"]["destination_id"] == 2

    def test_json_mode_error(self) -> None:
        output = format_result(_err("connect", "Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"

    def test_json_beats_quiet(self) -> None:
        output = format_result(_ok(point_id=3), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["data"]["point_id"] == 3


class TestFormatResultQuiet:
    def test_quiet_prints_id(self) -> None:
        output = format_result(_ok("create_point", point_id=3), settings=OutputSettings(quiet=True))
        assert output == "3"

    def test_quiet_without_id(self) -> None:
        output = format_result(_ok("check", count=0), settings=OutputSettings(quiet=True))
        assert output == "OK: check"

    def test_quiet_error(self) -> None:
        output = format_result(_err("connect", "Bad"), settings=OutputSettings(quiet=True))
        assert output == "ERROR: connect - Bad"


class TestFormatResultDefault:
    def test_default_uses_rich(self) -> None:
        output = format_result(_ok("anything", answer=42))
        assert "OK" in output
        assert "answer: 42" in output
