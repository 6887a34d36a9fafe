"""Commands: move documents between drafts and posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from blogctl.commands._base import BlogCommand
from blogctl.services._helpers import parse_cli_date
from blogctl.services.result import ServiceResult

if TYPE_CHECKING:
    from blogctl.commands._context import AppContext


@click.command(
    cls=BlogCommand,
    examples="""\
  blogctl publish constexpr-all-the-things
  blogctl publish constexpr-all-the-things --date 2024-05-01""",
)
@click.argument("slug")
@click.option("--date", "date_str", default=None, help="Publish date, YYYY-MM-DD (default: now).")
@click.pass_obj
def publish(app: AppContext, slug: str, date_str: str | None) -> None:
    """Move _drafts/SLUG.md to a dated post in _posts/."""
    from blogctl.services.publish import PublishService

    when = None
    if date_str is not None:
        try:
            when = parse_cli_date(date_str)
        except ValueError:
            app.emit(
                ServiceResult.failure(
                    "publish", "INVALID_DATE", f"Invalid date {date_str!r}; use YYYY-MM-DD"
                )
            )
            return
    app.emit(PublishService(app.site).publish(slug, date=when))


@click.command(
    cls=BlogCommand,
    examples="""\
  blogctl unpublish 2024-05-01-constexpr-all-the-things.md
  blogctl unpublish constexpr-all-the-things""",
)
@click.argument("name")
@click.pass_obj
def unpublish(app: AppContext, name: str) -> None:
    """Move a post back to _drafts/, keeping its date."""
    from blogctl.services.publish import PublishService

    app.emit(PublishService(app.site).unpublish(name))
