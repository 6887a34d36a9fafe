"""Command group: new drafts and posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from blogctl.commands._base import BlogGroup
from blogctl.services._helpers import parse_cli_date
from blogctl.services.create import CreateService
from blogctl.services.result import ServiceResult

if TYPE_CHECKING:
    from blogctl.commands._context import AppContext


_NEW_EXAMPLES = """\
  blogctl new draft "Constexpr All The Things"
  blogctl new draft "Inlining heuristics" --tag cpp --tag compilers
  blogctl new post "Release notes" --date 2024-03-01 --author jane
  blogctl new post "Tiny binaries" --excerpt "Shaving kilobytes off a hello world\""""


@click.group(cls=BlogGroup, examples=_NEW_EXAMPLES)
@click.pass_obj
def new(app: AppContext) -> None:
    """Create drafts and posts."""


def _split_tags(values: tuple[str, ...]) -> list[str]:
    tags: list[str] = []
    for value in values:
        tags.extend(t.strip() for t in value.split(",") if t.strip())
    return tags


@new.command(
    examples="""\
  blogctl new draft "Constexpr All The Things"
  blogctl new draft "Inlining heuristics" --tag cpp --tag compilers""",
)
@click.argument("title")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable, or comma-separated).")
@click.option("--author", default=None, help="Author key (default: [site] default_author).")
@click.option("--excerpt", default=None, help="Summary shown on archive pages.")
@click.pass_obj
def draft(
    app: AppContext,
    title: str,
    tags: tuple[str, ...],
    author: str | None,
    excerpt: str | None,
) -> None:
    """Create an undated draft in _drafts/."""
    app.emit(
        CreateService(app.site).create_draft(
            title, tags=_split_tags(tags), author=author, excerpt=excerpt
        )
    )


@new.command(
    examples="""\
  blogctl new post "Release notes"
  blogctl new post "Release notes" --date 2024-03-01 --tag meta""",
)
@click.argument("title")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable, or comma-separated).")
@click.option("--author", default=None, help="Author key (default: [site] default_author).")
@click.option("--excerpt", default=None, help="Summary shown on archive pages.")
@click.option("--date", "date_str", default=None, help="Publish date, YYYY-MM-DD (default: now).")
@click.pass_obj
def post(
    app: AppContext,
    title: str,
    tags: tuple[str, ...],
    author: str | None,
    excerpt: str | None,
    date_str: str | None,
) -> None:
    """Create a dated post in _posts/."""
    when = None
    if date_str is not None:
        try:
            when = parse_cli_date(date_str)
        except ValueError:
            app.emit(
                ServiceResult.failure(
                    "create_post", "INVALID_DATE", f"Invalid date {date_str!r}; use YYYY-MM-DD"
                )
            )
            return
    app.emit(
        CreateService(app.site).create_post(
            title, date=when, tags=_split_tags(tags), author=author, excerpt=excerpt
        )
    )
