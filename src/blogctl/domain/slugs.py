"""Slugs, post filenames, and permalink expansion.

A published post is identified by its ``(date, slug)`` pair, which is
encoded in the filename (``YYYY-MM-DD-slug.md``) and expanded into the
URL through the configured permalink pattern.

INVARIANT: two published posts never share a ``(date, slug)`` pair.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from pathlib import PurePosixPath

MARKDOWN_SUFFIXES = (".md", ".markdown")

DEFAULT_PERMALINK = "/:year/:month/:day/:slug/"

_POST_FILENAME = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")
_PERMALINK_TOKEN = re.compile(r":(year|month|day|slug|title|categories)\b")


def slugify(text: str) -> str:
    """Turn *text* into a URL slug.

    Examples:
        >>> slugify("Template Metaprogramming: Part 2")
        'template-metaprogramming-part-2'
        >>> slugify("  C++ -- tricks ")
        'c-tricks'

    Raises:
        ValueError: Nothing slug-worthy remains.
    """
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    ascii_text = re.sub(r"[^a-z0-9\s-]", "", ascii_text)
    slug = re.sub(r"[\s-]+", "-", ascii_text).strip("-")
    if not slug:
        msg = f"Cannot derive a slug from {text!r}"
        raise ValueError(msg)
    return slug


def is_markdown(name: str) -> bool:
    return name.lower().endswith(MARKDOWN_SUFFIXES)


def _stem(name: str) -> str:
    for suffix in MARKDOWN_SUFFIXES:
        if name.lower().endswith(suffix):
            return name[: -len(suffix)]
    return name


def parse_post_filename(name: str) -> tuple[date | None, str]:
    """Split ``YYYY-MM-DD-slug.md`` into ``(date, slug)``.

    Names without a valid date prefix (drafts, pages) return
    ``(None, stem)``.
    """
    stem = _stem(name)
    match = _POST_FILENAME.match(stem)
    if match is None:
        return None, stem
    year, month, day, slug = match.groups()
    try:
        return date(int(year), int(month), int(day)), slug
    except ValueError:
        return None, stem


def post_filename(when: date | datetime, slug: str) -> str:
    """Inverse of :func:`parse_post_filename`."""
    return f"{when:%Y-%m-%d}-{slug}.md"


def expand_permalink(
    pattern: str,
    *,
    when: date | datetime | None,
    slug: str,
    categories: tuple[str, ...] = (),
) -> str:
    """Expand a Jekyll-style permalink pattern into a site-relative URL.

    Examples:
        >>> expand_permalink("/:year/:month/:day/:slug/", when=date(2021, 3, 9), slug="x")
        '/2021/03/09/x/'
        >>> expand_permalink("/notes/:slug.html", when=None, slug="y")
        '/notes/y.html'
    """

    def replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token in ("slug", "title"):
            return slug
        if token == "categories":
            return "/".join(categories)
        if when is None:
            msg = f"Permalink {pattern!r} needs a date for :{token}"
            raise ValueError(msg)
        if token == "year":
            return f"{when:%Y}"
        if token == "month":
            return f"{when:%m}"
        return f"{when:%d}"

    url = _PERMALINK_TOKEN.sub(replace, pattern)
    return normalize_url(url)


def normalize_url(url: str) -> str:
    """Leading slash, collapsed slashes, trailing slash unless a file name."""
    url = "/" + url.lstrip("/")
    url = re.sub(r"/{2,}", "/", url)
    last = url.rsplit("/", 1)[-1]
    if last and "." not in last:
        url += "/"
    return url


def output_path_for(url: str) -> PurePosixPath:
    """Map a site URL to the file path written under the output directory.

    Examples:
        >>> str(output_path_for("/2021/03/09/x/"))
        '2021/03/09/x/index.html'
        >>> str(output_path_for("/feed.xml"))
        'feed.xml'
        >>> str(output_path_for("/"))
        'index.html'
    """
    clean = normalize_url(url).lstrip("/")
    if not clean or clean.endswith("/"):
        return PurePosixPath(clean) / "index.html"
    return PurePosixPath(clean)
