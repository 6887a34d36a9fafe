"""CheckService — lint the corpus and, optionally, the generated links.

Four categories of issue:

* ``frontmatter`` — unparseable or invalid front-matter, date mismatches,
  unknown page classes and layouts
* ``registry`` — author keys missing from ``_data/authors.yml``
* ``uniqueness`` — duplicate ``(date, slug)`` pairs and URL collisions
* ``links`` — internal ``href``/``src`` targets the build does not produce

Checking never modifies the site. Link checking builds into a temporary
directory.
"""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import unquote, urlsplit

import structlog
from bs4 import BeautifulSoup
from jinja2 import Environment, TemplateError, TemplateNotFound

from blogctl.domain.authors import AuthorRecord, AuthorRegistryError
from blogctl.domain.pages import is_known_page_class
from blogctl.infrastructure.site import AUTHORS_FILE, Document
from blogctl.infrastructure.templates import build_theme_environment
from blogctl.services._helpers import now_utc
from blogctl.services.base import BaseService, newest_first
from blogctl.services.build import BuildService, find_url_collisions, reserved_urls
from blogctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)

SEVERITIES = ("warning", "error")

_EXTERNAL_PREFIXES = ("http://", "https://", "//", "mailto:", "data:", "javascript:", "tel:")


def _issue(category: str, severity: str, path: str, message: str) -> dict[str, Any]:
    return {"category": category, "severity": severity, "path": path, "message": message}


class CheckService(BaseService):
    """Reports problems in the site without changing it."""

    def check(self, *, min_severity: str = "warning", links: bool = False) -> ServiceResult:
        """Run all checks and return the issues at or above *min_severity*."""
        op = "check"
        if min_severity not in SEVERITIES:
            return ServiceResult.failure(
                op, "INVALID_SEVERITY", f"Unknown severity {min_severity!r}"
            )

        documents, load_errors = self._load_documents(include_drafts=True, now=now_utc())
        issues: list[dict[str, Any]] = [
            _issue("frontmatter", "error", self._site.relative(err.path), str(err))
            for err in load_errors
        ]
        issues.extend(self._check_frontmatter(documents))
        issues.extend(self._check_registry(documents))
        issues.extend(self._check_uniqueness(documents))
        if links:
            issues.extend(self._check_links())

        threshold = SEVERITIES.index(min_severity)
        issues = [i for i in issues if SEVERITIES.index(i["severity"]) >= threshold]
        issues.sort(key=lambda i: (i["path"], i["category"], i["message"]))

        errors = sum(1 for i in issues if i["severity"] == "error")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "issues": issues,
                "count": len(issues),
                "errors": errors,
                "warnings": len(issues) - errors,
            },
        )

    # ── Front-matter ─────────────────────────────────────────────────

    def _check_frontmatter(self, documents: list[Document]) -> Iterator[dict[str, Any]]:
        allow_unknown = self._site.settings.check.allow_unknown_classes
        env = build_theme_environment(site_root=self._site.root)
        layouts: dict[str, str | None] = {}

        for doc in documents:
            fm = doc.frontmatter
            if doc.kind == "post" and doc.filename_date and doc.date:
                if doc.filename_date.date() != doc.date.date():
                    yield _issue(
                        "frontmatter",
                        "warning",
                        doc.rel_path,
                        f"Filename date {doc.filename_date:%Y-%m-%d} differs from "
                        f"front-matter date {doc.date:%Y-%m-%d}",
                    )

            if fm.page_class is not None and not allow_unknown:
                if not is_known_page_class(fm.page_class):
                    yield _issue(
                        "frontmatter",
                        "warning",
                        doc.rel_path,
                        f"Unknown class {fm.page_class!r}; the default pagination will be used",
                    )

            if fm.layout not in layouts:
                layouts[fm.layout] = _template_problem(env, f"{fm.layout}.html")
            problem = layouts[fm.layout]
            if problem:
                yield _issue("frontmatter", "error", doc.rel_path, problem)

    # ── Author registry ──────────────────────────────────────────────

    def _check_registry(self, documents: list[Document]) -> Iterator[dict[str, Any]]:
        try:
            registry: dict[str, AuthorRecord] = self._site.load_authors()
        except AuthorRegistryError as exc:
            yield _issue("registry", "error", AUTHORS_FILE.as_posix(), str(exc))
            return

        for doc in documents:
            if doc.author and doc.author not in registry:
                yield _issue(
                    "registry",
                    "error",
                    doc.rel_path,
                    f"Author {doc.author!r} is not in {AUTHORS_FILE.as_posix()}",
                )

    # ── Uniqueness ───────────────────────────────────────────────────

    def _check_uniqueness(self, documents: list[Document]) -> Iterator[dict[str, Any]]:
        published = [d for d in documents if d.kind != "draft"]

        seen: dict[tuple[str, str], str] = {}
        for doc in published:
            if doc.kind != "post" or doc.date is None:
                continue
            key = (f"{doc.date:%Y-%m-%d}", doc.slug)
            if key in seen:
                yield _issue(
                    "uniqueness",
                    "error",
                    doc.rel_path,
                    f"Post {key[0]}/{key[1]} duplicates {seen[key]}",
                )
            else:
                seen[key] = doc.rel_path

        settings = self._site.settings
        reserved = reserved_urls(
            newest_first(published),
            per_page=settings.build.paginate,
            default_author=settings.site.default_author,
        )
        for url, claimants in find_url_collisions(published, reserved=reserved).items():
            for path in claimants:
                if path == reserved.get(url):
                    continue
                others = ", ".join(c for c in claimants if c != path)
                yield _issue("uniqueness", "error", path, f"URL {url} is also produced by {others}")

    # ── Links ────────────────────────────────────────────────────────

    def _check_links(self) -> Iterator[dict[str, Any]]:
        with tempfile.TemporaryDirectory(prefix="blogctl-check-") as tmp:
            out = Path(tmp) / "site"
            result = BuildService(self._site).build(out, clean=True)
            if not result.ok:
                assert result.error is not None
                yield _issue(
                    "links",
                    "error",
                    str(result.error.detail.get("path", ".")),
                    f"Build failed, links not checked: {result.error.message}",
                )
                return

            baseurl = self._site.settings.site.baseurl.strip("/")
            prefix = f"/{baseurl}" if baseurl else ""
            for page in sorted(out.rglob("*.html")):
                rel = page.relative_to(out).as_posix()
                for target in _internal_targets(page.read_text(encoding="utf-8")):
                    if not _resolves(out, rel, target, prefix=prefix):
                        logger.debug("check.link_broken", page=rel, target=target)
                        yield _issue("links", "error", rel, f"Broken link: {target}")


def _template_problem(env: Environment, name: str) -> str | None:
    try:
        env.get_template(name)
    except TemplateNotFound:
        return f"Layout {name.removesuffix('.html')!r} has no template ({name})"
    except TemplateError as exc:
        return f"Layout template {name} does not compile: {exc}"
    return None


def _internal_targets(html: str) -> Iterator[str]:
    """Yield every internal ``href``/``src`` value in *html*."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(True):
        for attr in ("href", "src"):
            value = tag.get(attr)
            if not isinstance(value, str):
                continue
            value = value.strip()
            if not value or value.startswith("#") or value.lower().startswith(_EXTERNAL_PREFIXES):
                continue
            yield value


def _resolves(out: Path, page_rel: str, target: str, *, prefix: str = "") -> bool:
    """Whether *target*, linked from *page_rel*, names a generated file.

    Absolute targets carry the site baseurl (*prefix*), which is not part
    of the output tree.
    """
    path = unquote(urlsplit(target).path)
    if not path:
        return True
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        path = path[len(prefix) :] or "/"
    if path.startswith("/"):
        candidate = PurePosixPath(path.lstrip("/"))
    else:
        candidate = PurePosixPath(page_rel).parent / path

    parts: list[str] = []
    for part in candidate.parts:
        if part == "..":
            if not parts:
                return False
            parts.pop()
        elif part != ".":
            parts.append(part)
    resolved = out.joinpath(*parts) if parts else out

    if path.endswith("/") or resolved.is_dir():
        return (resolved / "index.html").is_file()
    return resolved.is_file()
