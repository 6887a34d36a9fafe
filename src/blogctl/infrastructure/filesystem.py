"""Filesystem operations for blog sources and build output.

Pure parsing/rendering utilities live in :mod:`blogctl.domain.content`
(correct dependency direction: infrastructure -> domain). This module
handles actual file I/O, path resolution, and file discovery.
"""

from __future__ import annotations

import fnmatch
import shutil
from pathlib import Path
from typing import Any

from blogctl.domain.content import parse_frontmatter, render_frontmatter
from blogctl.domain.slugs import is_markdown

# Marker written into every build output; only marked directories are cleaned.
BUILD_MARKER = ".blogctl-build"

# Directories never treated as site content.
_SKIP_DIRS = frozenset({".git", ".venv", "node_modules", "__pycache__", ".pytest_cache"})


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_content_file(path: Path) -> tuple[dict[str, Any], str]:
    """Read a markdown file, returning ``(frontmatter, body)``."""
    return parse_frontmatter(path.read_text(encoding="utf-8"))


def write_content_file(path: Path, frontmatter: dict[str, Any], body: str) -> None:
    """Write front-matter + body to a markdown file, creating parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frontmatter(frontmatter, body), encoding="utf-8")


def write_output(output_root: Path, rel_path: str, content: str) -> Path:
    """Write a rendered file under *output_root*.

    Raises:
        ValueError: *rel_path* escapes the output directory.
    """
    target = output_root / rel_path
    if not target.resolve().is_relative_to(output_root.resolve()):
        msg = f"Path escapes output directory: {rel_path}"
        raise ValueError(msg)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _skipped(path: Path, root: Path) -> bool:
    return any(part in _SKIP_DIRS for part in path.relative_to(root).parts)


def _excluded(rel: str, patterns: list[str]) -> bool:
    name = rel.rsplit("/", 1)[-1]
    return any(fnmatch.fnmatch(rel, pat) or fnmatch.fnmatch(name, pat) for pat in patterns)


def find_markdown_files(directory: Path) -> list[Path]:
    """All Markdown files below *directory*, sorted. Missing dir → []."""
    if not directory.is_dir():
        return []
    return sorted(
        p
        for p in directory.rglob("*")
        if p.is_file() and is_markdown(p.name) and not _skipped(p, directory)
    )


def find_root_pages(site_root: Path, *, exclude: list[str]) -> list[Path]:
    """Markdown pages living outside underscore directories.

    Pages may sit at the root (``about.md``) or in ordinary folders
    (``projects/compile-health.md``). Anything under a directory whose name
    starts with ``_`` or ``.`` belongs to a collection or tooling and is
    skipped.
    """
    results: list[Path] = []
    for path in site_root.rglob("*"):
        if not path.is_file() or not is_markdown(path.name):
            continue
        rel_parts = path.relative_to(site_root).parts
        if any(part.startswith(("_", ".")) for part in rel_parts[:-1]):
            continue
        if _skipped(path, site_root):
            continue
        rel = "/".join(rel_parts)
        if _excluded(rel, exclude):
            continue
        results.append(path)
    return sorted(results)


def find_static_files(site_root: Path, *, exclude: list[str], output_dir: Path) -> list[Path]:
    """Files copied verbatim into the output.

    Everything except Markdown, underscore/dot paths, excluded patterns,
    the config file, and the output directory itself.
    """
    output_resolved = output_dir.resolve()
    results: list[Path] = []
    for path in site_root.rglob("*"):
        if not path.is_file() or is_markdown(path.name):
            continue
        if path.resolve().is_relative_to(output_resolved):
            continue
        rel_parts = path.relative_to(site_root).parts
        if any(part.startswith(("_", ".")) for part in rel_parts):
            continue
        if _skipped(path, site_root):
            continue
        rel = "/".join(rel_parts)
        if rel == "blogctl.toml" or _excluded(rel, exclude):
            continue
        results.append(path)
    return sorted(results)


# ---------------------------------------------------------------------------
# Output directory management
# ---------------------------------------------------------------------------


def prepare_output_dir(output_dir: Path, *, clean: bool) -> None:
    """Create *output_dir*; wipe it first when it holds a prior build.

    Raises:
        FileExistsError: *clean* was requested but the directory is not
            empty and carries no build marker.
    """
    if clean and output_dir.exists():
        if (output_dir / BUILD_MARKER).is_file():
            shutil.rmtree(output_dir)
        elif any(output_dir.iterdir()):
            msg = f"Refusing to clean {output_dir}: not a blogctl build directory"
            raise FileExistsError(msg)
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / BUILD_MARKER).write_text("", encoding="utf-8")


def copy_static(src: Path, site_root: Path, output_dir: Path) -> str:
    """Copy *src* under *output_dir* at its site-relative path."""
    rel = src.relative_to(site_root)
    dest = output_dir / rel
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)
    return rel.as_posix()
