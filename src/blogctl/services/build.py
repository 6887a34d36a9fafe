"""BuildService — render the corpus through the page shell into a static tree.

Pipeline: LOAD → ORDER → RENDER (posts, pages, archives, feed, sitemap)
→ COPY STATIC → RESPOND. The first invalid source or template aborts the
build; nothing is half-reported as success.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from jinja2 import Environment, TemplateError, TemplateNotFound

from blogctl.domain.authors import AuthorRecord, AuthorRegistryError
from blogctl.domain.pages import AUTHOR_TEMPLATE, HOME_TEMPLATE, TAG_TEMPLATE, script_bundles
from blogctl.domain.pagination import Paginator, paginate
from blogctl.domain.seo import build_seo
from blogctl.domain.slugs import output_path_for, slugify
from blogctl.infrastructure.filesystem import (
    copy_static,
    find_static_files,
    prepare_output_dir,
    write_output,
)
from blogctl.infrastructure.markdown import excerpt_from_html, render_markdown
from blogctl.infrastructure.site import Document
from blogctl.infrastructure.templates import build_theme_environment
from blogctl.services._helpers import now_utc
from blogctl.services.base import BaseService, newest_first
from blogctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)

# URLs the build itself produces regardless of content.
GENERATED_URLS: dict[str, str] = {
    "/": "home index",
    "/feed.xml": "feed",
    "/sitemap.xml": "sitemap",
}


# ---------------------------------------------------------------------------
# URL helpers shared with CheckService
# ---------------------------------------------------------------------------


def tag_slug(tag: str) -> str:
    """URL slug of a tag; tags with no slug-worthy characters get a hash."""
    try:
        return slugify(tag)
    except ValueError:
        return "tag-" + hashlib.sha256(tag.encode("utf-8")).hexdigest()[:8]


def tag_url(tag: str) -> str:
    return f"/tag/{tag_slug(tag)}/"


def author_url(key: str) -> str:
    return f"/author/{key}/"


def group_tags(posts: list[Document]) -> dict[str, tuple[str, list[Document]]]:
    """``{slug: (display name, posts)}``; first spelling seen wins."""
    grouped: dict[str, tuple[str, list[Document]]] = {}
    for doc in posts:
        for tag in doc.tags:
            grouped.setdefault(tag_slug(tag), (tag, []))[1].append(doc)
    return grouped


def group_authors(posts: list[Document], default: str | None) -> dict[str, list[Document]]:
    """``{author key: posts}``; posts without an author fall back to *default*."""
    grouped: dict[str, list[Document]] = {}
    for doc in posts:
        key = doc.author or default
        if key:
            grouped.setdefault(key, []).append(doc)
    return grouped


def reserved_urls(
    posts: list[Document], *, per_page: int, default_author: str | None
) -> dict[str, str]:
    """Every URL the build generates itself, mapped to a label.

    Covers the feed, the sitemap and each page of the home, tag and author
    archives for *posts* (newest first).
    """
    reserved = dict(GENERATED_URLS)
    for paginator in paginate(posts, per_page, base_url="/")[1:]:
        reserved[paginator.url] = "home index"
    for slug, (name, tagged) in group_tags(posts).items():
        for paginator in paginate(tagged, per_page, base_url=f"/tag/{slug}/"):
            reserved[paginator.url] = f"tag archive {name!r}"
    for key, authored in group_authors(posts, default_author).items():
        for paginator in paginate(authored, per_page, base_url=author_url(key)):
            reserved[paginator.url] = f"author archive {key!r}"
    return reserved


def find_url_collisions(
    documents: Iterable[Document],
    *,
    reserved: dict[str, str] | None = None,
) -> dict[str, list[str]]:
    """Map every URL claimed more than once to the sources claiming it."""
    owners: dict[str, list[str]] = {url: [label] for url, label in (reserved or {}).items()}
    for doc in documents:
        owners.setdefault(doc.url, []).append(doc.rel_path)
    return {url: claimants for url, claimants in owners.items() if len(claimants) > 1}


# ---------------------------------------------------------------------------
# BuildService
# ---------------------------------------------------------------------------


class _TemplateFailure(Exception):
    def __init__(self, template: str, url: str, cause: TemplateError) -> None:
        super().__init__(f"{template} while rendering {url}: {cause}")
        self.template = template
        self.url = url


class BuildService(BaseService):
    """Renders the site into its output directory."""

    def build(
        self,
        output_dir: Path | None = None,
        *,
        include_drafts: bool = False,
        clean: bool = True,
    ) -> ServiceResult:
        """Render every document, archive, and feed; copy static files."""
        op = "build"
        out = (output_dir or self._site.output_dir).resolve()
        now = now_utc()

        documents, errors = self._load_documents(include_drafts=include_drafts, now=now)
        if errors:
            first = errors[0]
            return ServiceResult.failure(
                op,
                "INVALID_FRONTMATTER",
                str(first),
                path=self._site.relative(first.path),
                reason=first.reason,
                invalid_count=len(errors),
            )

        try:
            authors = self._site.load_authors()
        except AuthorRegistryError as exc:
            return ServiceResult.failure(op, "INVALID_REGISTRY", str(exc))

        posts = newest_first(documents)
        pages = [d for d in documents if d.kind == "page"]
        default_author = self._site.settings.site.default_author
        tags = group_tags(posts)
        author_posts = group_authors(posts, default_author)

        per_page = self._site.settings.build.paginate
        reserved = reserved_urls(posts, per_page=per_page, default_author=default_author)
        collisions = find_url_collisions(documents, reserved=reserved)
        if collisions:
            url, claimants = next(iter(collisions.items()))
            return ServiceResult.failure(
                op,
                "DUPLICATE_URL",
                f"{url} is produced by {', '.join(claimants)}",
                collisions=collisions,
            )

        try:
            prepare_output_dir(out, clean=clean)
        except FileExistsError as exc:
            return ServiceResult.failure(op, "UNSAFE_OUTPUT", str(exc), output_dir=str(out))

        warnings: list[str] = []
        resolved_authors = self._resolve_authors(author_posts, authors, warnings)

        env = build_theme_environment(
            site_root=self._site.root, baseurl=self._site.settings.site.baseurl
        )
        renderer = _Renderer(self, env, authors=resolved_authors, tags=tags, now=now)
        rendered_posts = {doc.url: renderer.summarize(doc) for doc in posts}

        written: list[str] = []
        try:
            for index, doc in enumerate(posts):
                newer = rendered_posts[posts[index - 1].url] if index > 0 else None
                older = rendered_posts[posts[index + 1].url] if index + 1 < len(posts) else None
                written.append(
                    self._write(out, doc.url, renderer.render_document(doc, newer, older))
                )
            for doc in pages:
                written.append(self._write(out, doc.url, renderer.render_document(doc)))

            summaries = [rendered_posts[d.url] for d in posts]
            for paginator in paginate(summaries, per_page, base_url="/"):
                written.append(
                    self._write(out, paginator.url, renderer.render_archive(HOME_TEMPLATE, paginator))
                )
            for slug, (name, tagged) in sorted(tags.items()):
                items = [rendered_posts[d.url] for d in tagged]
                for paginator in paginate(items, per_page, base_url=f"/tag/{slug}/"):
                    html = renderer.render_archive(
                        TAG_TEMPLATE, paginator, tag={"name": name, "slug": slug}
                    )
                    written.append(self._write(out, paginator.url, html))
            for key, authored in sorted(author_posts.items()):
                items = [rendered_posts[d.url] for d in authored]
                for paginator in paginate(items, per_page, base_url=author_url(key)):
                    html = renderer.render_archive(
                        AUTHOR_TEMPLATE, paginator, author=resolved_authors[key]
                    )
                    written.append(self._write(out, paginator.url, html))

            limit = self._site.settings.build.feed_limit
            written.append(self._write(out, "/feed.xml", renderer.render_feed(summaries[:limit])))
            sitemap_urls = ["/", *(d.url for d in posts), *(d.url for d in pages)]
            written.append(self._write(out, "/sitemap.xml", renderer.render_sitemap(sitemap_urls)))
        except _TemplateFailure as exc:
            return ServiceResult.failure(
                op, "TEMPLATE_ERROR", str(exc), template=exc.template, url=exc.url
            )
        except ValueError as exc:
            return ServiceResult.failure(op, "UNSAFE_OUTPUT", str(exc), output_dir=str(out))

        for static in find_static_files(
            self._site.root, exclude=self._site.settings.build.exclude, output_dir=out
        ):
            written.append(copy_static(static, self._site.root, out))

        logger.info("build.complete", output_dir=str(out), files=len(written))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "output_dir": str(out),
                "posts": sum(1 for d in posts if d.kind == "post"),
                "drafts": sum(1 for d in posts if d.kind == "draft"),
                "pages": len(pages),
                "tags": len(tags),
                "authors": len(author_posts),
                "files_written": written,
                "file_count": len(written),
            },
            warnings=warnings,
        )

    # ── Private helpers ───────────────────────────────────────────────

    @staticmethod
    def _write(out: Path, url: str, content: str) -> str:
        rel = output_path_for(url).as_posix()
        write_output(out, rel, content)
        logger.debug("build.page_rendered", url=url, path=rel)
        return rel

    @staticmethod
    def _resolve_authors(
        author_posts: dict[str, list[Document]],
        registry: dict[str, AuthorRecord],
        warnings: list[str],
    ) -> dict[str, AuthorRecord]:
        resolved = dict(registry)
        for key in author_posts:
            if key not in resolved:
                warnings.append(f"Author {key!r} is not in the author registry")
                resolved[key] = AuthorRecord(key=key, name=key)
        return resolved


class _Renderer:
    """Builds template contexts and renders them with one environment."""

    def __init__(
        self,
        service: BuildService,
        env: Environment,
        *,
        authors: dict[str, AuthorRecord],
        tags: dict[str, tuple[str, list[Document]]],
        now: datetime,
    ) -> None:
        self._site = service._site
        self._settings = service._site.settings
        self._env = env
        self._authors = authors
        self._now = now
        self._html_cache: dict[str, str] = {}
        self._site_ctx = self._site_context(tags)

    # ── Context builders ─────────────────────────────────────────────

    def _site_context(self, tags: dict[str, tuple[str, list[Document]]]) -> dict[str, Any]:
        cfg = self._settings.site
        scripts = self._settings.scripts
        return {
            "title": cfg.title,
            "description": cfg.description,
            "url": cfg.url.rstrip("/"),
            "baseurl": cfg.baseurl,
            "lang": cfg.lang,
            "logo": cfg.logo,
            "cover": cfg.cover,
            "navigation": [item.model_dump() for item in cfg.navigation],
            "footer_text": cfg.footer_text,
            "analytics_id": scripts.analytics_id,
            "icon_font_url": scripts.icon_font_url,
            "tags": [
                {"name": name, "slug": slug, "url": f"/tag/{slug}/", "count": len(docs)}
                for slug, (name, docs) in sorted(tags.items())
            ],
            "time": self._now,
        }

    def _html(self, doc: Document) -> str:
        if doc.url not in self._html_cache:
            self._html_cache[doc.url] = render_markdown(doc.body)
        return self._html_cache[doc.url]

    def _excerpt(self, doc: Document) -> str:
        if doc.frontmatter.excerpt:
            return doc.frontmatter.excerpt
        return excerpt_from_html(self._html(doc), words=self._settings.build.excerpt_words)

    def _author_for(self, doc: Document) -> AuthorRecord | None:
        key = doc.author or self._settings.site.default_author
        return self._authors.get(key) if key else None

    def summarize(self, doc: Document) -> dict[str, Any]:
        """The card-sized view of a post used by archives, feed, and neighbours."""
        author = self._author_for(doc)
        return {
            "title": doc.title,
            "url": doc.url,
            "date": doc.date,
            "excerpt": self._excerpt(doc),
            "cover": doc.frontmatter.cover,
            "draft": doc.kind == "draft",
            "tags": [{"name": t, "slug": tag_slug(t), "url": tag_url(t)} for t in doc.tags],
            "author": _author_ctx(author),
            "content": self._html(doc),
        }

    def _page_context(self, doc: Document) -> dict[str, Any]:
        fm = doc.frontmatter
        ctx: dict[str, Any] = {**fm.extras}
        ctx.update(
            title=doc.title,
            url=doc.url,
            layout=fm.layout,
            subclass=fm.subclass,
            navigation=fm.navigation,
            math=fm.math,
            cover=fm.cover,
            date=doc.date,
            excerpt=self._excerpt(doc),
            content=self._html(doc),
            tags=[{"name": t, "slug": tag_slug(t), "url": tag_url(t)} for t in doc.tags],
            author=_author_ctx(self._author_for(doc)) if doc.is_post else None,
            draft=doc.kind == "draft",
        )
        ctx["class"] = doc.page_class
        return ctx

    def _scripts(self, page_class: str | None, *, math: bool) -> list[str]:
        scripts = self._settings.scripts
        urls: list[str] = []
        for bundle in script_bundles(page_class, math=math):
            if bundle == "math":
                urls.append(scripts.math_url)
            else:
                urls.extend(scripts.bundles.get(bundle, []))
        return urls

    # ── Rendering ────────────────────────────────────────────────────

    def _render(self, template_name: str, url: str, context: dict[str, Any]) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as exc:
            raise _TemplateFailure(f"missing template {exc.name!r}", url, exc) from exc
        except TemplateError as exc:
            raise _TemplateFailure(template_name, url, exc) from exc

    def render_document(
        self,
        doc: Document,
        newer: dict[str, Any] | None = None,
        older: dict[str, Any] | None = None,
    ) -> str:
        page = self._page_context(doc)
        author = self._author_for(doc) if doc.is_post else None
        seo = build_seo(
            self._site.identity,
            title=doc.title,
            url=doc.url,
            page_class=doc.page_class,
            excerpt=page["excerpt"],
            cover=doc.frontmatter.cover,
            date=doc.date if doc.is_post else None,
            tags=doc.tags,
            author=author.name if author else None,
        )
        context = {
            "site": self._site_ctx,
            "page": page,
            "content": page["content"],
            "seo": asdict(seo),
            "scripts": self._scripts(doc.page_class, math=doc.frontmatter.math),
            "paginator": None,
            "newer_post": newer,
            "older_post": older,
            "compile_health": self._settings.compile_health.model_dump(),
        }
        return self._render(f"{doc.frontmatter.layout}.html", doc.url, context)

    def render_archive(
        self,
        page_class: str,
        paginator: Paginator,
        *,
        tag: dict[str, str] | None = None,
        author: AuthorRecord | None = None,
    ) -> str:
        if page_class == TAG_TEMPLATE and tag:
            title = f"Tag: {tag['name']}"
            layout = "tag"
        elif page_class == AUTHOR_TEMPLATE and author:
            title = author.name
            layout = "author"
        else:
            title = None
            layout = "index"
        if title and paginator.page > 1:
            title = f"{title} (page {paginator.page})"
        elif title is None and paginator.page > 1:
            title = f"Page {paginator.page}"

        seo = build_seo(
            self._site.identity,
            title=title,
            url=paginator.url,
            page_class=page_class if paginator.page == 1 else None,
            excerpt=author.bio if author else None,
        )
        page = {
            "title": title or self._settings.site.title,
            "url": paginator.url,
            "class": page_class,
            "layout": layout,
            "navigation": True,
            "cover": self._settings.site.cover,
        }
        context = {
            "site": self._site_ctx,
            "page": page,
            "content": "",
            "seo": asdict(seo),
            "scripts": self._scripts(page_class, math=False),
            "paginator": paginator,
            "posts": paginator.items,
            "tag": tag,
            "author": _author_ctx(author),
        }
        return self._render(f"{layout}.html", paginator.url, context)

    def render_feed(self, entries: list[dict[str, Any]]) -> str:
        context = {
            "site": self._site_ctx,
            "posts": entries,
            "updated": entries[0]["date"] if entries else self._now,
            "feed_url": self._site.identity.absolute("/feed.xml"),
            "absolute": self._site.identity.absolute,
        }
        return self._render("feed.xml", "/feed.xml", context)

    def render_sitemap(self, urls: list[str]) -> str:
        absolute = [self._site.identity.absolute(u) for u in urls]
        return self._render("sitemap.xml", "/sitemap.xml", {"urls": absolute})


def _author_ctx(author: AuthorRecord | None) -> dict[str, Any] | None:
    if author is None:
        return None
    ctx = author.model_dump()
    ctx["url_path"] = author_url(author.key)
    return ctx
