"""Tests for the build CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from blogctl.cli import cli
from tests.conftest import write_draft, write_post


@pytest.mark.usefixtures("_isolated_site")
class TestBuildCommand:
    def test_build_default(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_post(tmp_path, "hello")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "build" in result.output
        assert (tmp_path / "_site" / "2024" / "01" / "15" / "hello" / "index.html").is_file()

    def test_build_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_post(tmp_path, "hello", tags=["cpp"])
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "build"
        assert data["data"]["posts"] == 1
        assert data["data"]["tags"] == 1
        assert "index.html" in data["data"]["files_written"]

    def test_build_output_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_post(tmp_path, "hello")
        result = cli_runner.invoke(cli, ["build", "-o", "public"])
        assert result.exit_code == 0
        assert (tmp_path / "public" / "index.html").is_file()
        assert not (tmp_path / "_site").exists()

    def test_build_drafts(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_draft(tmp_path, "idea")
        result = cli_runner.invoke(cli, ["--json", "build", "--drafts"])
        assert json.loads(result.output)["data"]["drafts"] == 1

    def test_build_verbose_lists_files(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_post(tmp_path, "hello")
        result = cli_runner.invoke(cli, ["-v", "build"])
        assert result.exit_code == 0
        assert "feed.xml" in result.output

    def test_build_quiet(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_post(tmp_path, "hello")
        result = cli_runner.invoke(cli, ["-q", "build"])
        assert result.exit_code == 0
        assert result.output.strip() == "OK: build"

    def test_build_failure_exits_1(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "_posts" / "2024-01-01-bad.md").write_text("no front-matter\n")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "INVALID_FRONTMATTER" in result.output
        assert result.stdout == ""

    def test_build_refuses_foreign_dir(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "_site").mkdir()
        (tmp_path / "_site" / "keep.txt").write_text("x")
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "UNSAFE_OUTPUT"

        result = cli_runner.invoke(cli, ["build", "--no-clean"])
        assert result.exit_code == 0
        assert (tmp_path / "_site" / "keep.txt").exists()

    def test_build_warnings_on_stderr(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_post(tmp_path, "hello", author="zed")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0
        assert "WARNING:" in result.stderr
        assert "WARNING:" not in result.stdout
