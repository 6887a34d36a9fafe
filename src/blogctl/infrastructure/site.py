"""Site — repository over the blog's source tree.

The Site is the single dependency injected into every service. It owns
path resolution for the collections (posts, drafts, pages), the author
registry, and turns source files into :class:`Document` values.

INVARIANT: Files are truth. Nothing is cached across Site instances and
nothing outside the output directory is written during a build.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Literal

from pydantic import ValidationError
from ruamel.yaml import YAMLError

from blogctl.domain.authors import AuthorRecord, AuthorRegistryError, load_authors
from blogctl.domain.content import (
    DocumentFrontmatter,
    FrontmatterError,
    PageFrontmatter,
    PostFrontmatter,
    has_frontmatter,
    parse_frontmatter,
)
from blogctl.domain.seo import SiteIdentity
from blogctl.domain.slugs import expand_permalink, normalize_url, parse_post_filename
from blogctl.infrastructure.filesystem import find_markdown_files, find_root_pages

if TYPE_CHECKING:
    from blogctl.config.settings import BlogSettings


DocumentKind = Literal["post", "draft", "page"]

AUTHORS_FILE = PurePosixPath("_data/authors.yml")


class DocumentError(Exception):
    """A source file could not be turned into a Document.

    Attributes:
        path: The offending file.
        reason: Short machine-readable reason
            (``encoding``, ``no_frontmatter``, ``yaml``, ``validation``,
            ``missing_date``, ``permalink``).
    """

    def __init__(self, path: Path, reason: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class SourceFile:
    """A Markdown file and the collection it was found in."""

    path: Path
    kind: DocumentKind


@dataclass(frozen=True)
class Document:
    """A parsed, validated source file with its resolved URL."""

    kind: DocumentKind
    path: Path
    rel_path: str
    frontmatter: PostFrontmatter | PageFrontmatter
    body: str
    slug: str
    date: datetime | None
    url: str
    filename_date: datetime | None = None

    @property
    def title(self) -> str:
        return self.frontmatter.title

    @property
    def page_class(self) -> str:
        return self.frontmatter.effective_class

    @property
    def tags(self) -> list[str]:
        fm = self.frontmatter
        return list(fm.tags) if isinstance(fm, PostFrontmatter) else []

    @property
    def author(self) -> str | None:
        fm = self.frontmatter
        return fm.author if isinstance(fm, PostFrontmatter) else None

    @property
    def is_post(self) -> bool:
        return self.kind in ("post", "draft")


class Site:
    """Blog source tree, resolved from settings."""

    def __init__(self, settings: BlogSettings) -> None:
        self._settings = settings
        self._root = settings.site_root

    @property
    def root(self) -> Path:
        return self._root

    @property
    def settings(self) -> BlogSettings:
        return self._settings

    @property
    def posts_dir(self) -> Path:
        return self._root / self._settings.build.source_dirs.posts

    @property
    def drafts_dir(self) -> Path:
        return self._root / self._settings.build.source_dirs.drafts

    @property
    def pages_dir(self) -> Path:
        return self._root / self._settings.build.source_dirs.pages

    @property
    def authors_path(self) -> Path:
        return self._root / AUTHORS_FILE

    @property
    def output_dir(self) -> Path:
        return self._settings.output_root

    @property
    def identity(self) -> SiteIdentity:
        cfg = self._settings.site
        return SiteIdentity(
            title=cfg.title,
            description=cfg.description,
            url=cfg.url,
            baseurl=cfg.baseurl,
            cover=cfg.cover,
        )

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self._root).as_posix()
        except ValueError:
            return path.as_posix()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def sources(self, *, include_drafts: bool = False) -> list[SourceFile]:
        """All Markdown sources: posts, optionally drafts, then pages."""
        found = [SourceFile(p, "post") for p in find_markdown_files(self.posts_dir)]
        if include_drafts:
            found.extend(SourceFile(p, "draft") for p in find_markdown_files(self.drafts_dir))
        found.extend(SourceFile(p, "page") for p in find_markdown_files(self.pages_dir))
        found.extend(
            SourceFile(p, "page")
            for p in find_root_pages(self._root, exclude=self._settings.build.exclude)
        )
        return found

    def load_authors(self) -> dict[str, AuthorRecord]:
        """Read the author registry; a missing file is an empty registry.

        Raises:
            AuthorRegistryError: The file is malformed.
        """
        path = self.authors_path
        if not path.is_file():
            return {}
        try:
            return load_authors(path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, YAMLError, ValidationError) as exc:
            raise AuthorRegistryError(f"{self.relative(path)}: {exc}") from exc

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, source: SourceFile, *, now: datetime | None = None) -> Document:
        """Parse and validate one source file.

        Drafts without a date are stamped with *now* so they get a URL.

        Raises:
            DocumentError: The file cannot become a Document.
        """
        path = source.path
        rel = self.relative(path)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentError(
                path, "encoding", f"{rel}: not valid UTF-8 (byte {exc.start})"
            ) from exc
        if not has_frontmatter(text):
            raise DocumentError(path, "no_frontmatter", f"{rel}: missing front-matter block")
        try:
            raw, body = parse_frontmatter(text)
        except (YAMLError, FrontmatterError) as exc:
            raise DocumentError(path, "yaml", f"{rel}: invalid YAML front-matter: {exc}") from exc

        model_cls = PageFrontmatter if source.kind == "page" else PostFrontmatter
        try:
            fm = model_cls.model_validate(raw)
        except ValidationError as exc:
            detail = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'frontmatter'}: {err['msg']}"
                for err in exc.errors()
            )
            raise DocumentError(path, "validation", f"{rel}: {detail}") from exc

        if source.kind == "page":
            slug = path.stem
            url = self._page_url(path, fm)
            return Document(
                kind="page",
                path=path,
                rel_path=rel,
                frontmatter=fm,
                body=body,
                slug=slug,
                date=None,
                url=url,
            )

        assert isinstance(fm, PostFrontmatter)
        file_date, slug = parse_post_filename(path.name)
        filename_dt = datetime(file_date.year, file_date.month, file_date.day) if file_date else None
        when = fm.date or filename_dt
        if when is None and source.kind == "draft":
            when = now or datetime.now()
        if when is None:
            raise DocumentError(
                path, "missing_date", f"{rel}: published post has no date in front-matter or filename"
            )

        if fm.permalink:
            url = normalize_url(fm.permalink)
        else:
            try:
                url = expand_permalink(self._settings.build.permalink, when=when, slug=slug)
            except ValueError as exc:
                raise DocumentError(path, "permalink", f"{rel}: {exc}") from exc

        return Document(
            kind=source.kind,
            path=path,
            rel_path=rel,
            frontmatter=fm,
            body=body,
            slug=slug,
            date=when,
            url=url,
            filename_date=filename_dt,
        )

    def _page_url(self, path: Path, fm: DocumentFrontmatter) -> str:
        if fm.permalink:
            return normalize_url(fm.permalink)
        base = self.pages_dir if path.is_relative_to(self.pages_dir) else self._root
        rel = path.relative_to(base).with_suffix("")
        if rel.name == "index":
            rel = rel.parent
        return normalize_url(rel.as_posix() if str(rel) != "." else "/")
