"""QueryService — read-only listings over the corpus.

Two surfaces:
- list_posts: posts (optionally drafts) newest first, filtered by tag/author
- list_tags: tag usage counts across published posts

Invalid sources are skipped and reported as warnings; ``blogctl check``
is the place to diagnose them.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from blogctl.services._helpers import format_fm_date, now_utc
from blogctl.services.base import BaseService, newest_first
from blogctl.services.build import tag_slug
from blogctl.services.result import ServiceResult


class QueryService(BaseService):
    """Lists posts and tags."""

    def list_posts(
        self,
        *,
        drafts: bool = False,
        tag: str | None = None,
        author: str | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        """Posts newest first.

        Args:
            drafts: Include ``_drafts/`` (undated drafts sort as "now").
            tag: Only posts carrying this tag (case-insensitive).
            author: Only posts by this author key.
            limit: Maximum number of items.
        """
        documents, errors = self._load_documents(include_drafts=drafts, now=now_utc())
        posts = newest_first(documents)

        if tag:
            wanted = tag.lower()
            posts = [d for d in posts if any(t.lower() == wanted for t in d.tags)]
        if author:
            default = self._site.settings.site.default_author
            posts = [d for d in posts if (d.author or default) == author]
        if limit is not None:
            posts = posts[:limit]

        items: list[dict[str, Any]] = [
            {
                "slug": d.slug,
                "title": d.title,
                "date": format_fm_date(d.date) if d.date else None,
                "tags": d.tags,
                "author": d.author,
                "url": d.url,
                "draft": d.kind == "draft",
                "path": d.rel_path,
            }
            for d in posts
        ]
        return ServiceResult(
            ok=True,
            op="list_posts",
            data={"items": items, "count": len(items)},
            warnings=[f"Skipped {self._site.relative(e.path)}: {e.reason}" for e in errors],
        )

    def list_tags(self) -> ServiceResult:
        """Tags of published posts with their counts, most used first."""
        documents, errors = self._load_documents(include_drafts=False)
        counts: Counter[str] = Counter()
        for doc in newest_first(documents):
            counts.update(doc.tags)

        items = [
            {"tag": name, "slug": tag_slug(name), "count": count}
            for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0].lower()))
        ]
        return ServiceResult(
            ok=True,
            op="list_tags",
            data={"items": items, "count": len(items)},
            warnings=[f"Skipped {self._site.relative(e.path)}: {e.reason}" for e in errors],
        )
