"""Tests for format_result output modes."""

import json

from blogctl.output.formatters import OutputSettings, format_result
from blogctl.services.result import ServiceResult

RESULT = ServiceResult(
    ok=True,
    op="create_draft",
    data={"slug": "hello", "title": "Hello", "path": "_drafts/hello.md", "tags": ["cpp"]},
)


class TestFormatResult:
    def test_json(self) -> None:
        data = json.loads(format_result(RESULT, json_output=True))
        assert data["ok"] is True
        assert data["data"]["slug"] == "hello"
        assert data["error"] is None

    def test_settings_take_precedence(self) -> None:
        out = format_result(RESULT, settings=OutputSettings(quiet=True), json_output=True)
        assert out == "OK: create_draft"

    def test_human(self) -> None:
        out = format_result(RESULT)
        assert out.startswith("OK  create_draft")
        assert "slug: hello" in out
        assert "tags" not in out

    def test_verbose(self) -> None:
        out = format_result(RESULT, settings=OutputSettings(verbose=True))
        assert "tags: cpp" in out

    def test_json_failure(self) -> None:
        failure = ServiceResult.failure("publish", "NOT_FOUND", "No draft named 'x'", slug="x")
        data = json.loads(format_result(failure, settings=OutputSettings(json_output=True)))
        assert data["ok"] is False
        assert data["error"] == {
            "code": "NOT_FOUND",
            "message": "No draft named 'x'",
            "detail": {"slug": "x"},
        }
