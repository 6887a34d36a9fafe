"""CreateService — new drafts and posts.

Pipeline: VALIDATE → GENERATE → PERSIST → RESPOND
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from jinja2 import TemplateError
from pydantic import ValidationError

from blogctl.domain.content import PostFrontmatter
from blogctl.domain.pages import POST_TEMPLATE
from blogctl.domain.slugs import post_filename, slugify
from blogctl.infrastructure.filesystem import write_content_file
from blogctl.infrastructure.templates import build_template_environment
from blogctl.services._helpers import format_fm_date, now_utc
from blogctl.services.base import BaseService
from blogctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)

BODY_TEMPLATE = "post.md.j2"


class CreateService(BaseService):
    """Writes new Markdown sources into the draft and post collections."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_draft(
        self,
        title: str,
        *,
        tags: list[str] | None = None,
        author: str | None = None,
        excerpt: str | None = None,
    ) -> ServiceResult:
        """Create ``_drafts/<slug>.md``; drafts carry no date."""
        return self._create(
            "create_draft",
            title,
            when=None,
            tags=tags,
            author=author,
            excerpt=excerpt,
        )

    def create_post(
        self,
        title: str,
        *,
        date: datetime | None = None,
        tags: list[str] | None = None,
        author: str | None = None,
        excerpt: str | None = None,
    ) -> ServiceResult:
        """Create ``_posts/YYYY-MM-DD-<slug>.md`` dated *date* (default now, UTC)."""
        return self._create(
            "create_post",
            title,
            when=date or now_utc(),
            tags=tags,
            author=author,
            excerpt=excerpt,
        )

    # ------------------------------------------------------------------
    # Pipeline (private)
    # ------------------------------------------------------------------

    def _create(
        self,
        op: str,
        title: str,
        *,
        when: datetime | None,
        tags: list[str] | None,
        author: str | None,
        excerpt: str | None,
    ) -> ServiceResult:
        # ── VALIDATE ──────────────────────────────────────────────
        try:
            slug = slugify(title)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_TITLE", str(exc), title=title)

        raw: dict[str, Any] = {
            "layout": "post",
            "title": title,
            "class": POST_TEMPLATE,
            "tags": tags or [],
            "author": author or self._site.settings.site.default_author,
            "excerpt": excerpt,
        }
        if when is not None:
            raw["date"] = when
        try:
            fm = PostFrontmatter.model_validate(raw)
        except ValidationError as exc:
            return ServiceResult.failure(
                op, "INVALID_FRONTMATTER", "; ".join(e["msg"] for e in exc.errors())
            )

        # ── GENERATE ──────────────────────────────────────────────
        if when is None:
            path = self._site.drafts_dir / f"{slug}.md"
        else:
            path = self._site.posts_dir / post_filename(when, slug)
        rel_path = self._site.relative(path)
        if path.exists():
            return ServiceResult.failure(
                op, "ALREADY_EXISTS", f"{rel_path} already exists", path=rel_path
            )

        try:
            body = self._render_body(title=fm.title, excerpt=fm.excerpt)
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_ERROR", str(exc), template=BODY_TEMPLATE)

        # ── PERSIST ───────────────────────────────────────────────
        frontmatter = fm.to_frontmatter()
        if when is not None:
            frontmatter["date"] = format_fm_date(when)
        if not fm.tags:
            frontmatter.pop("tags", None)
        write_content_file(path, frontmatter, body)
        logger.info("content.created", op=op, path=rel_path)

        data: dict[str, Any] = {
            "slug": slug,
            "title": fm.title,
            "path": rel_path,
            "tags": list(fm.tags),
        }
        if when is not None:
            data["date"] = format_fm_date(when)
        return ServiceResult(ok=True, op=op, data=data)

    def _render_body(self, **context: Any) -> str:
        env = build_template_environment("content", site_root=self._site.root)
        return env.get_template(BODY_TEMPLATE).render(**context)

