"""Command: site scaffolding (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from blogctl.commands._base import BlogCommand

if TYPE_CHECKING:
    from blogctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  blogctl init
  blogctl init my-blog --title "Compile Time" --author "Jane Doe"
  blogctl init . --url https://blog.example.org
  blogctl --no-interact init /tmp/blog"""


@click.command("init", cls=BlogCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--title", default=None, help="Site title.")
@click.option("--author", default=None, help="Author display name (its slug becomes the key).")
@click.option("--url", default=None, help="Public site URL.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    title: str | None,
    author: str | None,
    url: str | None,
) -> None:
    """Scaffold a new blog."""
    site_path = Path(path).resolve()
    interactive = not app.settings.no_interact and not app.settings.json_output

    if title is None:
        default_title = site_path.name.replace("-", " ").title() or "My Technical Blog"
        title = click.prompt("Site title", default=default_title) if interactive else default_title

    if author is None:
        author = click.prompt("Author name", default="Author") if interactive else "Author"

    if url is None:
        default_url = "http://localhost:4000"
        url = click.prompt("Site URL", default=default_url) if interactive else default_url

    from blogctl.services.init import InitService

    app.emit(InitService.init_site(site_path, title=title, author=author, url=url))
