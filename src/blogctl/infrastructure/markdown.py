"""Markdown → HTML rendering on top of markdown-it-py.

blogctl does not parse Markdown itself. The renderer is configured once
(CommonMark plus tables and strikethrough, raw HTML allowed) and shared.
"""

from __future__ import annotations

import html
import re
from functools import lru_cache

from markdown_it import MarkdownIt

_TAG = re.compile(r"<[^>]+>")
_PARAGRAPH = re.compile(r"<p>(.*?)</p>", re.DOTALL)


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    return (
        MarkdownIt("commonmark", {"html": True, "typographer": True})
        .enable("table")
        .enable("strikethrough")
    )


def render_markdown(text: str) -> str:
    """Render Markdown *text* to an HTML fragment."""
    return _parser().render(text)


def strip_html(fragment: str) -> str:
    """Drop tags, unescape entities, and collapse whitespace."""
    text = html.unescape(_TAG.sub(" ", fragment))
    return re.sub(r"\s+", " ", text).strip()


def truncate_words(text: str, words: int) -> str:
    """Keep the first *words* words, appending an ellipsis when cut."""
    parts = text.split()
    if len(parts) <= words:
        return " ".join(parts)
    return " ".join(parts[:words]) + "…"


def excerpt_from_html(rendered: str, *, words: int) -> str:
    """Plain-text excerpt from the first non-empty paragraph of *rendered*."""
    for match in _PARAGRAPH.finditer(rendered):
        text = strip_html(match.group(1))
        if text:
            return truncate_words(text, words)
    return truncate_words(strip_html(rendered), words)
