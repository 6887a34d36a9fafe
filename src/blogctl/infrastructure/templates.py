"""Shared Jinja2 template loading with per-site override support."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    Undefined,
    select_autoescape,
)

from blogctl.domain.pages import pagination_partial, script_bundles
from blogctl.domain.pagination import page_url
from blogctl.domain.slugs import slugify


def build_template_environment(group: str, *, site_root: Path | None = None) -> Environment:
    """Environment for authoring templates (``content``, ``scaffold``).

    Site overrides are read from ``_templates/<group>/`` and then
    ``_templates/`` before the packaged defaults.
    """
    loaders: list[BaseLoader] = []
    if site_root is not None:
        template_root = site_root / "_templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("blogctl", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def _date_format(value: datetime | None, fmt: str = "%d %B %Y") -> str:
    if value is None:
        return ""
    return value.strftime(fmt)


def _rfc3339(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%dT%H:%M:%S+00:00")


def build_theme_environment(*, site_root: Path | None = None, baseurl: str = "") -> Environment:
    """Environment for the page shell, layouts, and partials.

    Lookup order mirrors Jekyll: ``_layouts/`` and ``_includes/`` in the
    site win over the packaged theme. Undefined variables render empty, so
    optional front-matter keys can be tested with plain ``{% if %}``.
    """
    loaders: list[BaseLoader] = []
    if site_root is not None:
        loaders.append(
            FileSystemLoader([str(site_root / "_layouts"), str(site_root / "_includes")])
        )
    loaders.append(PackageLoader("blogctl", "templates/theme"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html", "xml"]),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=Undefined,
    )
    prefix = "/" + baseurl.strip("/") if baseurl.strip("/") else ""

    def relative_url(path: str | None) -> str:
        if not path:
            return prefix + "/"
        if path.startswith(("http://", "https://", "//", "mailto:", "#", "data:")):
            return path
        return prefix + "/" + path.lstrip("/")

    env.globals["pagination_partial"] = pagination_partial
    env.globals["script_bundles"] = script_bundles
    env.globals["page_url"] = page_url
    env.filters["relative_url"] = relative_url
    env.filters["date_format"] = _date_format
    env.filters["rfc3339"] = _rfc3339
    env.filters["slugify"] = slugify
    return env
