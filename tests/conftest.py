"""Shared pytest fixtures and test helpers for blogctl tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from blogctl.config.settings import BlogSettings
from blogctl.domain.content import render_frontmatter
from blogctl.infrastructure.site import Site

AUTHORS_YML = """\
jane:
  name: Jane Doe
  bio: Writes about compilers.
  twitter: "@jane"
bob:
  name: Bob
"""

SITE_TOML = """\
[site]
title = "Test Blog"
description = "Notes on C++ and compilers"
url = "https://blog.example.org"
default_author = "jane"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary blog directory with config, author registry, and assets.

    This is the single source of truth for the test site layout. All
    site-related fixtures (site, _isolated_site) build on this.
    """
    (tmp_path / "_posts").mkdir()
    (tmp_path / "_drafts").mkdir()
    (tmp_path / "_data").mkdir()
    (tmp_path / "_data" / "authors.yml").write_text(AUTHORS_YML, encoding="utf-8")
    (tmp_path / "assets" / "css").mkdir(parents=True)
    (tmp_path / "assets" / "css" / "style.css").write_text("body {}\n", encoding="utf-8")
    (tmp_path / "assets" / "js").mkdir()
    (tmp_path / "assets" / "js" / "site.js").write_text("// site\n", encoding="utf-8")
    (tmp_path / "blogctl.toml").write_text(SITE_TOML, encoding="utf-8")
    return tmp_path


@pytest.fixture
def site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> Site:
    """Site over the temporary blog directory."""
    monkeypatch.delenv("BLOGCTL_CONFIG", raising=False)
    return Site(BlogSettings.from_cli(site_root=site_root))


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp site so the CLI discovers its blogctl.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes. Tests that need the path can also request ``tmp_path``
    directly (pytest deduplicates: it's the same directory).
    """
    monkeypatch.delenv("BLOGCTL_CONFIG", raising=False)
    monkeypatch.chdir(site_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def write_post(
    root: Path,
    slug: str,
    *,
    date: str = "2024-01-15",
    title: str | None = None,
    body: str = "First paragraph of the post.\n",
    **frontmatter: Any,
) -> Path:
    """Write ``_posts/<date>-<slug>.md`` with a minimal valid front-matter."""
    fm: dict[str, Any] = {
        "layout": "post",
        "title": title or slug.replace("-", " ").title(),
        "date": date,
        **frontmatter,
    }
    path = root / "_posts" / f"{date[:10]}-{slug}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frontmatter(fm, body), encoding="utf-8")
    return path


def write_draft(
    root: Path,
    slug: str,
    *,
    title: str | None = None,
    body: str = "Draft body.\n",
    **frontmatter: Any,
) -> Path:
    """Write ``_drafts/<slug>.md`` without a date."""
    fm: dict[str, Any] = {
        "layout": "post",
        "title": title or slug.replace("-", " ").title(),
        **frontmatter,
    }
    path = root / "_drafts" / f"{slug}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frontmatter(fm, body), encoding="utf-8")
    return path


def write_page(root: Path, rel: str, *, title: str, body: str = "Page body.\n", **frontmatter: Any) -> Path:
    """Write a standalone page at *rel* (relative to the site root)."""
    fm: dict[str, Any] = {"title": title, **frontmatter}
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frontmatter(fm, body), encoding="utf-8")
    return path


def settings_for(root: Path, **overrides: Any) -> BlogSettings:
    """Settings for *root* with CLI-level overrides."""
    return BlogSettings.from_cli(site_root=root, **overrides)
