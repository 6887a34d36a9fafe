"""Tests for the new draft / new post CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from blogctl.cli import cli


@pytest.mark.usefixtures("_isolated_site")
class TestNewDraft:
    def test_draft(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["new", "draft", "Constexpr All The Things"])
        assert result.exit_code == 0, result.output
        assert "create_draft" in result.output
        assert "constexpr-all-the-things" in result.output
        assert (tmp_path / "_drafts" / "constexpr-all-the-things.md").is_file()

    def test_draft_tags_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "new", "draft", "Inlining", "--tag", "cpp,compilers", "--tag", "llvm"]
        )
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["tags"] == ["cpp", "compilers", "llvm"]

    def test_draft_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "new", "draft", "Hello"])
        assert result.output.strip() == "OK: create_draft"

    def test_duplicate_draft(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["new", "draft", "Hello"]).exit_code == 0
        result = cli_runner.invoke(cli, ["new", "draft", "Hello"])
        assert result.exit_code == 1
        assert "ALREADY_EXISTS" in result.output

    def test_untitled(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "new", "draft", "???"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_TITLE"


@pytest.mark.usefixtures("_isolated_site")
class TestNewPost:
    def test_post_with_date(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "new", "post", "Release Notes", "--date", "2024-03-01", "--author", "bob"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["path"] == "_posts/2024-03-01-release-notes.md"
        assert data["date"] == "2024-03-01 00:00:00"
        assert "author: bob" in (tmp_path / data["path"]).read_text()

    def test_post_bad_date(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "new", "post", "Hello", "--date", "soon"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_DATE"
        assert list((tmp_path / "_posts").iterdir()) == []

    def test_post_excerpt(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "new", "post", "Tiny", "--date", "2024-01-01", "--excerpt", "Small."]
        )
        path = tmp_path / json.loads(result.output)["data"]["path"]
        assert "excerpt: Small." in path.read_text()
