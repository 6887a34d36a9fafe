"""Command: content lint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from blogctl.commands._base import BlogCommand

if TYPE_CHECKING:
    from blogctl.commands._context import AppContext


@click.command(
    cls=BlogCommand,
    examples="""\
  blogctl check
  blogctl check --errors-only
  blogctl check --min-severity error
  blogctl check --links
  blogctl --json check""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option(
    "--links/--no-links",
    default=None,
    help="Build into a temporary directory and check internal links.",
)
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool, links: bool | None) -> None:
    """Lint front-matter, authors, URLs and (optionally) links.

    Exits 1 when any error-severity issue is reported.
    """
    from blogctl.services.check import CheckService

    threshold = "error" if errors_only else min_severity
    check_links = app.settings.check.links if links is None else links
    result = CheckService(app.site).check(min_severity=threshold, links=check_links)
    app.emit(result)
    if result.data.get("errors", 0):
        raise SystemExit(1)
