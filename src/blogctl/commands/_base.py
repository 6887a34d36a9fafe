"""Click base classes for blogctl commands.

Commands and groups take an ``examples=`` string. It is shown by an eager
``--examples`` flag instead of in ``--help``; the help epilog only points
at the flag.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def _format_examples(examples: str) -> str:
    """Normalize an examples block to a two-space indent."""
    return textwrap.indent(textwrap.dedent(examples).strip("\n"), "  ")


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(_format_examples(examples))
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples and exit.",
        )
    )


class _ExamplesMixin:
    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)  # type: ignore[arg-type]

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"See '{ctx.command_path} --examples' for usage examples.")


class BlogCommand(_ExamplesMixin, click.Command):
    """A command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class BlogGroup(_ExamplesMixin, click.Group):
    """A group whose subcommands and subgroups are Blog* classes too."""

    command_class = BlogCommand
    group_class = type

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
