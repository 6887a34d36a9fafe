"""InitService — scaffold a new blog.

Writes a sparse ``blogctl.toml``, the collection directories, an author
registry, a welcome post and the compile-health page. Everything is
rendered from the packaged ``scaffold`` templates.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from jinja2 import TemplateError

from blogctl.config.discovery import CONFIG_FILENAME
from blogctl.domain.slugs import post_filename, slugify
from blogctl.infrastructure.site import AUTHORS_FILE
from blogctl.infrastructure.templates import build_template_environment
from blogctl.services._helpers import format_fm_date, now_utc
from blogctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)

# (template, destination) pairs; "{welcome}" is replaced with the dated filename.
_SCAFFOLD: tuple[tuple[str, str], ...] = (
    ("blogctl.toml.j2", CONFIG_FILENAME),
    ("authors.yml.j2", AUTHORS_FILE.as_posix()),
    ("welcome.md.j2", "_posts/{welcome}"),
    ("compile-health.md.j2", "compile-health.md"),
    ("style.css.j2", "assets/css/style.css"),
    ("site.js.j2", "assets/js/site.js"),
)

_EMPTY_DIRS = ("_drafts", "_pages", "_layouts", "_includes")


class InitService:
    """Site scaffolding. Runs before a site exists, so it has no Site."""

    @staticmethod
    def init_site(
        path: Path,
        *,
        title: str,
        author: str,
        url: str = "http://localhost:4000",
        description: str = "",
    ) -> ServiceResult:
        """Create a new site at *path*.

        *author* is a display name; its slug becomes the registry key and
        the site's ``default_author``.
        """
        op = "init_site"
        root = path.resolve()
        if (root / CONFIG_FILENAME).exists():
            return ServiceResult.failure(
                op,
                "ALREADY_INITIALIZED",
                f"{root / CONFIG_FILENAME} already exists",
                path=str(root),
            )
        try:
            author_key = slugify(author)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_TITLE", f"Invalid author: {exc}")
        if not title.strip():
            return ServiceResult.failure(op, "INVALID_TITLE", "Site title must not be empty")

        now = now_utc()
        welcome = post_filename(now, "welcome")
        context = {
            "title": title.strip(),
            "description": description,
            "url": url.rstrip("/"),
            "author": author_key,
            "author_name": author,
            "date": format_fm_date(now),
        }

        env = build_template_environment("scaffold")
        rendered: list[tuple[Path, str]] = []
        try:
            for template_name, dest in _SCAFFOLD:
                content = env.get_template(template_name).render(**context)
                rendered.append((root / dest.format(welcome=welcome), content))
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_ERROR", str(exc))

        files: list[str] = []
        for target, content in rendered:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            files.append(target.relative_to(root).as_posix())
        for name in _EMPTY_DIRS:
            (root / name).mkdir(parents=True, exist_ok=True)

        logger.info("site.initialized", path=str(root), files=len(files))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(root),
                "title": context["title"],
                "author": author_key,
                "files": files,
            },
        )
