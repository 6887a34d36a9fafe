"""PublishService — move documents between ``_drafts/`` and ``_posts/``.

A draft becomes a post by gaining a date: the file moves to
``_posts/YYYY-MM-DD-<slug>.md`` and the front-matter ``date`` is set. The
reverse transition keeps the date so a later publish lands on the same URL.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from ruamel.yaml import YAMLError

from blogctl.domain.content import FrontmatterError, PostFrontmatter
from blogctl.domain.slugs import (
    MARKDOWN_SUFFIXES,
    expand_permalink,
    normalize_url,
    parse_post_filename,
    post_filename,
)
from blogctl.infrastructure.filesystem import find_markdown_files, read_content_file, write_content_file
from blogctl.services._helpers import format_fm_date, now_utc
from blogctl.services.base import BaseService
from blogctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)


def _strip_suffix(name: str) -> str:
    for suffix in MARKDOWN_SUFFIXES:
        if name.lower().endswith(suffix):
            return name[: -len(suffix)]
    return name


class PublishService(BaseService):
    """Draft lifecycle: publish and unpublish."""

    def publish(self, slug: str, *, date: datetime | None = None) -> ServiceResult:
        """Promote ``_drafts/<slug>.md`` to a dated post.

        The date is *date* if given, else the draft's own ``date``, else now.
        """
        op = "publish"
        slug = _strip_suffix(Path(slug).name)
        source = self._find_draft(slug)
        if source is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"No draft named {slug!r}", slug=slug)

        loaded = self._read(op, source)
        if isinstance(loaded, ServiceResult):
            return loaded
        raw, fm, body = loaded

        when = date or fm.date or now_utc()
        target = self._site.posts_dir / post_filename(when, slug)
        rel_target = self._site.relative(target)
        if target.exists():
            return ServiceResult.failure(
                op, "ALREADY_EXISTS", f"{rel_target} already exists", path=rel_target
            )

        raw["date"] = format_fm_date(when)
        write_content_file(target, raw, body)
        source.unlink()
        logger.info("content.published", source=self._site.relative(source), target=rel_target)

        if fm.permalink:
            url = normalize_url(fm.permalink)
        else:
            url = expand_permalink(self._site.settings.build.permalink, when=when, slug=slug)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "slug": slug,
                "title": fm.title,
                "date": format_fm_date(when),
                "from_path": self._site.relative(source),
                "path": rel_target,
                "url": url,
            },
        )

    def unpublish(self, name: str) -> ServiceResult:
        """Move a post back to ``_drafts/<slug>.md``, keeping its date.

        *name* is a post filename (with or without suffix) or a bare slug.
        """
        op = "unpublish"
        stem = _strip_suffix(Path(name).name)
        matches = [
            p
            for p in find_markdown_files(self._site.posts_dir)
            if _strip_suffix(p.name) == stem or parse_post_filename(p.name)[1] == stem
        ]
        if not matches:
            return ServiceResult.failure(op, "NOT_FOUND", f"No post named {name!r}", name=name)
        if len(matches) > 1:
            candidates = [self._site.relative(p) for p in matches]
            return ServiceResult.failure(
                op,
                "AMBIGUOUS",
                f"{name!r} matches {len(matches)} posts; pass the filename",
                candidates=candidates,
            )
        source = matches[0]

        loaded = self._read(op, source)
        if isinstance(loaded, ServiceResult):
            return loaded
        raw, fm, body = loaded

        file_date, slug = parse_post_filename(source.name)
        target = self._site.drafts_dir / f"{slug}.md"
        rel_target = self._site.relative(target)
        if target.exists():
            return ServiceResult.failure(
                op, "ALREADY_EXISTS", f"{rel_target} already exists", path=rel_target
            )

        if fm.date is not None:
            raw["date"] = format_fm_date(fm.date)
        elif file_date is not None:
            raw["date"] = f"{file_date:%Y-%m-%d}"
        write_content_file(target, raw, body)
        source.unlink()
        logger.info("content.unpublished", source=self._site.relative(source), target=rel_target)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "slug": slug,
                "title": fm.title,
                "from_path": self._site.relative(source),
                "path": rel_target,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_draft(self, slug: str) -> Path | None:
        for suffix in MARKDOWN_SUFFIXES:
            candidate = self._site.drafts_dir / f"{slug}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def _read(
        self, op: str, path: Path
    ) -> tuple[dict[str, Any], PostFrontmatter, str] | ServiceResult:
        rel = self._site.relative(path)
        try:
            raw, body = read_content_file(path)
        except UnicodeDecodeError as exc:
            return ServiceResult.failure(
                op, "INVALID_FRONTMATTER", f"{rel}: not valid UTF-8 (byte {exc.start})", path=rel
            )
        except (YAMLError, FrontmatterError) as exc:
            return ServiceResult.failure(
                op, "INVALID_FRONTMATTER", f"{rel}: invalid YAML front-matter: {exc}", path=rel
            )
        try:
            fm = PostFrontmatter.model_validate(raw)
        except ValidationError as exc:
            detail = "; ".join(e["msg"] for e in exc.errors())
            return ServiceResult.failure(op, "INVALID_FRONTMATTER", f"{rel}: {detail}", path=rel)
        return raw, fm, body
