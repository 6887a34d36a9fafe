"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from blogctl.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from blogctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    # Listings print one identifier per line
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(ident for ident in (_extract_slug(i) for i in items) if ident)

    if result.op == "check":
        return "\n".join(
            f"{i['severity']}: {i['path']}: {i['message']}" for i in result.data.get("issues", [])
        ) or f"OK: {result.op}"

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_slug(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("slug", "tag"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="blog.ok")
    op = Text(f"  {result.op}", style="blog.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="blog.key")
    if key == "slug":
        v = Text(str(value), style="blog.slug")
    elif key in ("path", "from_path", "output_dir"):
        v = Text(str(value), style="blog.path")
    elif key == "title":
        v = Text(str(value), style="blog.title")
    elif key == "date":
        v = Text(str(value), style="blog.date")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":"), default=str))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="blog.error")
    op = Text(f"  {result.op}", style="blog.op")
    code = Text(f" [{err.code}]" if err else "", style="blog.key")
    console.print(label, op, code, Text(" - "), Text(msg), sep="")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/publish/unpublish results."""
    _status_line(console, result)
    for key in ("slug", "title", "date", "from_path", "path", "url"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose and result.data.get("tags"):
        _field(console, "tags", ", ".join(result.data["tags"]))


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("path", "title", "author"):
        _field(console, key, result.data.get(key, ""))
    files = result.data.get("files", [])
    if verbose:
        for name in files:
            console.print(f"    [blog.path]{name}[/blog.path]")
    else:
        _field(console, "files", len(files))


# ── Build / check ─────────────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a build summary; the file list only in verbose mode."""
    d = result.data
    _status_line(console, result)
    _field(console, "output_dir", d.get("output_dir", ""))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for column in ("Posts", "Drafts", "Pages", "Tags", "Authors", "Files"):
        table.add_column(column, style="blog.count", justify="right")
    table.add_row(
        *(
            str(d.get(key, 0))
            for key in ("posts", "drafts", "pages", "tags", "authors", "file_count")
        )
    )
    console.print(table)

    if verbose:
        for path in d.get("files_written", []):
            console.print(f"  [blog.path]{path}[/blog.path]")


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[blog.ok]OK[/blog.ok]  No issues found.")
        return

    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_category.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for category, category_issues in by_category.items():
        console.print(f"\n[bold]{category}[/bold]")
        for issue in category_issues:
            sev = str(issue.get("severity", "warning"))
            style = style_for_severity(sev)
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            path = issue.get("path", "")
            line = Text.from_markup(f"  {prefix} ")
            line.append(str(path), style="blog.path")
            line.append(f": {issue.get('message', '')}")
            console.print(line)

    errors = sum(1 for i in issues if i.get("severity") == "error")
    warnings = count - errors
    console.print(f"\n{errors} errors, {warnings} warnings")


# ── Query renderers ───────────────────────────────────────────────────


def _render_posts(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_posts as a table, drafts highlighted."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Date", style="blog.date", no_wrap=True)
    table.add_column("Slug", style="blog.slug", no_wrap=True)
    table.add_column("Title", style="blog.title")
    table.add_column("Tags", style="blog.tag")
    if verbose:
        table.add_column("Author")
        table.add_column("URL", style="dim")

    for item in items:
        date = str(item.get("date") or "")[:10]
        slug = Text(str(item.get("slug", "")))
        if item.get("draft"):
            slug.append(" (draft)", style="blog.draft")
        row: list[Any] = [date, slug, str(item.get("title", "")), ", ".join(item.get("tags", []))]
        if verbose:
            row.extend([str(item.get("author") or ""), str(item.get("url", ""))])
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} posts")


def _render_tags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Tag", style="blog.tag")
    table.add_column("Posts", style="blog.count", justify="right")
    if verbose:
        table.add_column("Slug", style="dim")
    for item in items:
        row = [str(item.get("tag", "")), str(item.get("count", 0))]
        if verbose:
            row.append(str(item.get("slug", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} tags")


# ── Generic ───────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback: status line plus every data field."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    # Authoring
    "create_post": _render_mutation,
    "create_draft": _render_mutation,
    "publish": _render_mutation,
    "unpublish": _render_mutation,
    "init_site": _render_init,
    # Build
    "build": _render_build,
    "check": _render_check,
    # Query
    "list_posts": _render_posts,
    "list_tags": _render_tags,
}
