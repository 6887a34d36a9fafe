"""Root CLI group: global flags, settings resolution, command registration."""

from __future__ import annotations

from pathlib import Path

import click

from blogctl import __version__
from blogctl.commands import register_commands
from blogctl.commands._base import BlogGroup
from blogctl.commands._context import AppContext
from blogctl.config.discovery import CONFIG_FILENAME, config_in
from blogctl.config.settings import BlogSettings

_CLI_EXAMPLES = """\
  blogctl init my-blog --title "Compiler Notes" --author "Jane Doe"
  blogctl -c my-blog build
  blogctl --json check --links
  BLOGCTL_BUILD__PAGINATE=10 blogctl build --drafts"""


@click.group(cls=BlogGroup, invoke_without_command=True, examples=_CLI_EXAMPLES)
@click.version_option(version=__version__, prog_name="blogctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"{CONFIG_FILENAME} to use, or the site directory holding it.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: Path | None,
) -> None:
    """blogctl: build, lint, and author a Markdown technical blog."""
    if config_path is not None and config_in(config_path) is None:
        raise click.BadParameter(
            f"no {CONFIG_FILENAME} at {config_path}", param_hint="'-c' / '--config'"
        )
    ctx.obj = AppContext(
        BlogSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
            no_interact=no_interact,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
