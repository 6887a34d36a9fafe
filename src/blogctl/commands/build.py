"""Command: render the site."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from blogctl.commands._base import BlogCommand

if TYPE_CHECKING:
    from blogctl.commands._context import AppContext


@click.command(
    cls=BlogCommand,
    examples="""\
  blogctl build
  blogctl build --drafts
  blogctl build --output /tmp/preview --no-clean
  blogctl -v build""",
)
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: [build] output_dir).",
)
@click.option("--drafts", is_flag=True, help="Render drafts as posts dated now.")
@click.option("--no-clean", is_flag=True, help="Keep files from the previous build.")
@click.pass_obj
def build(app: AppContext, output_dir: Path | None, drafts: bool, no_clean: bool) -> None:
    """Render posts, pages, archives, and feeds into static HTML."""
    from blogctl.services.build import BuildService

    app.emit(
        BuildService(app.site).build(
            output_dir,
            include_drafts=drafts,
            clean=not no_clean,
        )
    )
