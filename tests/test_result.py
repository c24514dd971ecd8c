# -*- coding: utf-8 -*-
"""
Tests for core.result module - Result and ActionError types
"""

import pytest

from gitshlc.core.result import ActionError, Result, Severity


class TestActionError:
    def test_defaults(self):
        error = ActionError(code="GIT-0002", severity=Severity.ERROR, message="git command failed")
        assert error.detail is None

    def test_immutable(self):
        error = ActionError(code="CFG-0001", severity=Severity.ERROR, message="unknown action")
        with pytest.raises(AttributeError):
            error.code = "MODIFIED"

    def test_to_dict(self):
        error = ActionError("FS-0101", Severity.ERROR, "localPath does not exist", "/nope")
        assert error.to_dict() == {
            "code": "FS-0101",
            "severity": "ERROR",
            "message": "localPath does not exist",
            "detail": "/nope",
        }

    def test_severity_from_plain_string(self):
        error = ActionError("GIT-0403", "INFO", "already initialized")
        assert error.to_dict()["severity"] == "INFO"


class TestResult:
    def test_success(self):
        result = Result.success("value")
        assert result.ok is True
        assert result.value == "value"
        assert result.error is None

    def test_failure(self):
        error = ActionError("SSH-0001", Severity.FATAL, "ssh not found")
        result = Result.failure(error)
        assert result.ok is False
        assert result.value is None
        assert result.error is error

    def test_unwrap_or(self):
        assert Result.success(3).unwrap_or(0) == 3
        assert Result.success(None).unwrap_or(0) == 0
        error = ActionError("X", Severity.ERROR, "x")
        assert Result.failure(error).unwrap_or("fallback") == "fallback"
