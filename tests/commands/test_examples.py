"""Tests for --examples flag on CLI commands.

Parametrized to cover all commands that define examples text.
"""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from blogctl.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["blogctl init my-blog", "blogctl -c my-blog build"]),
    # -- new --
    (["new", "--examples"], ["blogctl new draft", "blogctl new post"]),
    (["new", "draft", "--examples"], ["--tag cpp"]),
    (["new", "post", "--examples"], ["--date 2024-03-01"]),
    # -- list --
    (["list", "--examples"], ["blogctl list posts", "blogctl list tags"]),
    (["list", "posts", "--examples"], ["--author jane"]),
    (["list", "tags", "--examples"], ["blogctl --json list tags"]),
    # -- standalone commands --
    (["init", "--examples"], ["blogctl init"]),
    (["build", "--examples"], ["--drafts", "--no-clean"]),
    (["check", "--examples"], ["--errors-only", "--links"]),
    (["publish", "--examples"], ["--date 2024-05-01"]),
    (["unpublish", "--examples"], ["blogctl unpublish"]),
]


@pytest.mark.parametrize(
    ("args", "keywords"),
    EXAMPLES_COMMANDS,
    ids=[" ".join(args) for args, _ in EXAMPLES_COMMANDS],
)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


def test_examples_not_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["build", "--help"])
    assert "--examples" in result.output
    assert "blogctl build --output /tmp/preview" not in result.output


def test_help_points_at_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["publish", "--help"])
    assert "--examples' for usage examples" in result.output


def test_examples_indented_uniformly(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["list", "--examples"])
    lines = [line for line in result.output.splitlines()[1:] if line.strip()]
    assert lines
    assert all(line.startswith("  blogctl") for line in lines)
