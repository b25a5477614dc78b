"""Tests for the error catalog and PathError."""

from __future__ import annotations

import pytest

from pathctl.domain.errors import ErrorCode, ErrorKind, PathError


class TestErrorCode:
    def test_code_is_member_name(self) -> None:
        assert ErrorCode.BACKWARD_PATH.code == "BACKWARD_PATH"

    @pytest.mark.parametrize(
        ("code", "kind"),
        [
            (ErrorCode.NULL_POINTS, ErrorKind.VALIDATION),
            (ErrorCode.SAME_POINTS, ErrorKind.VALIDATION),
            (ErrorCode.EDGE_ALREADY_EXISTS, ErrorKind.CONFLICT),
            (ErrorCode.BACKWARD_PATH, ErrorKind.CONFLICT),
            (ErrorCode.POINT_NOT_DELETABLE, ErrorKind.CONFLICT),
            (ErrorCode.POINT_NOT_FOUND, ErrorKind.NOT_FOUND),
            (ErrorCode.PROJECT_NOT_FOUND, ErrorKind.NOT_FOUND),
            (ErrorCode.INTERNAL_SERVER, ErrorKind.INTERNAL),
        ],
    )
    def test_kinds(self, code: ErrorCode, kind: ErrorKind) -> None:
        assert code.kind is kind

    def test_codes_are_unique(self) -> None:
        templates = [c.template for c in ErrorCode]
        assert len(templates) == len(set(templates))

    def test_format(self) -> None:
        msg = ErrorCode.SAME_POINTS.format(point=7)
        assert msg.endswith("point: 7")


class TestPathError:
    def test_message_rendered_from_params(self) -> None:
        exc = PathError(ErrorCode.BACKWARD_PATH, depth=5, origin=3, destination=1)
        assert "within 5 edges" in exc.message
        assert "origin: 3" in str(exc)

    def test_detail_carries_kind_and_params(self) -> None:
        exc = PathError(ErrorCode.NON_EXISTENT_POINTS, points=(1, 2))
        assert exc.detail() == {"kind": "not_found", "points": [1, 2]}

    def test_internal_server_keeps_cause(self) -> None:
        cause = RuntimeError("disk on fire")
        exc = PathError(ErrorCode.INTERNAL_SERVER, cause=cause)
        assert exc.cause is cause
        assert "disk on fire" in exc.params["cause"]
        assert exc.kind is ErrorKind.INTERNAL

    def test_internal_server_without_cause(self) -> None:
        exc = PathError(ErrorCode.INTERNAL_SERVER)
        assert exc.params["cause"] == "unknown"

    def test_detail_stringifies_objects(self) -> None:
        exc = PathError(ErrorCode.INVALID_INPUT, field="origin", value=1.5)
        assert exc.detail()["value"] == "1.5"

    def test_is_exception(self) -> None:
        with pytest.raises(PathError) as info:
            raise PathError(ErrorCode.USER_NOT_FOUND, user=4)
        assert info.value.code is ErrorCode.USER_NOT_FOUND
