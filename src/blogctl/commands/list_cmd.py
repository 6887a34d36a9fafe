"""Command group: listings (named list_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from blogctl.commands._base import BlogGroup
from blogctl.services.query import QueryService

if TYPE_CHECKING:
    from blogctl.commands._context import AppContext


@click.group(
    "list",
    cls=BlogGroup,
    examples="""\
  blogctl list posts
  blogctl list posts --drafts --tag cpp
  blogctl -q list posts --limit 5
  blogctl list tags""",
)
@click.pass_obj
def list_group(app: AppContext) -> None:
    """List posts and tags."""


@list_group.command(
    examples="""\
  blogctl list posts
  blogctl list posts --drafts
  blogctl list posts --tag compilers --author jane --limit 10""",
)
@click.option("--drafts", is_flag=True, help="Include drafts.")
@click.option("--tag", default=None, help="Only posts with this tag.")
@click.option("--author", default=None, help="Only posts by this author key.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum posts.")
@click.pass_obj
def posts(
    app: AppContext,
    drafts: bool,
    tag: str | None,
    author: str | None,
    limit: int | None,
) -> None:
    """List posts, newest first."""
    app.emit(
        QueryService(app.site).list_posts(drafts=drafts, tag=tag, author=author, limit=limit)
    )


@list_group.command(examples="  blogctl list tags\n  blogctl --json list tags")
@click.pass_obj
def tags(app: AppContext) -> None:
    """List tags with post counts."""
    app.emit(QueryService(app.site).list_tags())
