"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from ucmigrate.domain.errors import MalformedDocumentError, SettingsFileNotFoundError
from ucmigrate.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="migrate", data={"found": False})
        assert result.ok is True
        assert result.op == "migrate"
        assert result.data == {"found": False}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_with_warnings(self) -> None:
        result = ServiceResult(
            ok=True,
            op="migrate",
            warnings=["Setting 'Legacy' is not declared by the target schema"],
        )
        assert len(result.warnings) == 1

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="find_latest",
            data={"found": True, "version": "1.9.0.0"},
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["version"] == "1.9.0.0"

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_from_exception(self) -> None:
        error = ServiceError.from_exception(MalformedDocumentError("bad xml"), path="/x")
        assert error.code == "MALFORMED_DOCUMENT"
        assert error.message == "bad xml"
        assert error.detail == {"path": "/x"}

    def test_file_not_found_code(self) -> None:
        error = ServiceError.from_exception(SettingsFileNotFoundError("gone"))
        assert error.code == "FILE_NOT_FOUND"
        assert error.detail == {}
