"""Tests for Site discovery and document loading."""

from datetime import datetime
from pathlib import Path

import pytest

from blogctl.domain.authors import AuthorRegistryError
from blogctl.infrastructure.site import DocumentError, Site, SourceFile
from tests.conftest import settings_for, write_draft, write_page, write_post


class TestSources:
    def test_posts_pages_and_drafts(self, site: Site) -> None:
        root = site.root
        write_post(root, "hello")
        write_draft(root, "idea")
        write_page(root, "about.md", title="About")
        write_page(root, "_pages/contact.md", title="Contact")

        kinds = [(s.kind, site.relative(s.path)) for s in site.sources()]
        assert ("post", "_posts/2024-01-15-hello.md") in kinds
        assert ("page", "about.md") in kinds
        assert ("page", "_pages/contact.md") in kinds
        assert not any(kind == "draft" for kind, _ in kinds)

        with_drafts = site.sources(include_drafts=True)
        assert any(s.kind == "draft" for s in with_drafts)

    def test_readme_excluded(self, site: Site) -> None:
        (site.root / "README.md").write_text("# readme\n")
        assert not any(s.path.name == "README.md" for s in site.sources())


class TestLoadPost:
    def test_url_from_permalink_pattern(self, site: Site) -> None:
        path = write_post(site.root, "hello-world", date="2024-03-09 10:30:00")
        doc = site.load(SourceFile(path, "post"))
        assert doc.slug == "hello-world"
        assert doc.url == "/2024/03/09/hello-world/"
        assert doc.date == datetime(2024, 3, 9, 10, 30)
        assert doc.page_class == "post-template"
        assert doc.is_post

    def test_filename_date_fallback(self, site: Site) -> None:
        path = site.posts_dir / "2023-07-04-no-date.md"
        path.write_text("---\ntitle: No date\n---\nBody\n", encoding="utf-8")
        doc = site.load(SourceFile(path, "post"))
        assert doc.date == datetime(2023, 7, 4)
        assert doc.url == "/2023/07/04/no-date/"

    def test_explicit_permalink(self, site: Site) -> None:
        path = write_post(site.root, "x", permalink="/custom/place")
        assert site.load(SourceFile(path, "post")).url == "/custom/place/"

    def test_missing_date(self, site: Site) -> None:
        path = site.posts_dir / "undated.md"
        path.write_text("---\ntitle: Undated\n---\nBody\n", encoding="utf-8")
        with pytest.raises(DocumentError) as exc_info:
            site.load(SourceFile(path, "post"))
        assert exc_info.value.reason == "missing_date"

    def test_draft_gets_now(self, site: Site) -> None:
        path = write_draft(site.root, "idea")
        now = datetime(2025, 5, 6, 7, 8, 9)
        doc = site.load(SourceFile(path, "draft"), now=now)
        assert doc.date == now
        assert doc.url == "/2025/05/06/idea/"

    def test_no_frontmatter(self, site: Site) -> None:
        path = site.posts_dir / "2024-01-01-bare.md"
        path.write_text("Just text\n", encoding="utf-8")
        with pytest.raises(DocumentError) as exc_info:
            site.load(SourceFile(path, "post"))
        assert exc_info.value.reason == "no_frontmatter"

    def test_bad_yaml(self, site: Site) -> None:
        path = site.posts_dir / "2024-01-01-bad.md"
        path.write_text("---\ntitle: [unclosed\n---\nBody\n", encoding="utf-8")
        with pytest.raises(DocumentError) as exc_info:
            site.load(SourceFile(path, "post"))
        assert exc_info.value.reason == "yaml"

    def test_invalid_utf8(self, site: Site) -> None:
        path = site.posts_dir / "2024-02-01-latin1.md"
        path.write_bytes(b"---\ntitle: x\n---\n\xff\xfe body\n")
        with pytest.raises(DocumentError, match="UTF-8") as exc_info:
            site.load(SourceFile(path, "post"))
        assert exc_info.value.reason == "encoding"

    def test_validation_error_names_field(self, site: Site) -> None:
        path = site.posts_dir / "2024-01-01-notitle.md"
        path.write_text("---\nlayout: post\n---\nBody\n", encoding="utf-8")
        with pytest.raises(DocumentError, match="title") as exc_info:
            site.load(SourceFile(path, "post"))
        assert exc_info.value.reason == "validation"

    def test_tags_and_author(self, site: Site) -> None:
        path = write_post(site.root, "t", tags=["C++", "llvm"], author="bob")
        doc = site.load(SourceFile(path, "post"))
        assert doc.tags == ["C++", "llvm"]
        assert doc.author == "bob"


class TestLoadPage:
    def test_root_page_url(self, site: Site) -> None:
        path = write_page(site.root, "about.md", title="About")
        doc = site.load(SourceFile(path, "page"))
        assert doc.url == "/about/"
        assert doc.date is None
        assert doc.page_class == "page-template"
        assert doc.tags == []
        assert doc.author is None

    def test_nested_index_page(self, site: Site) -> None:
        path = write_page(site.root, "projects/index.md", title="Projects")
        assert site.load(SourceFile(path, "page")).url == "/projects/"

    def test_pages_dir_is_stripped(self, site: Site) -> None:
        path = write_page(site.root, "_pages/compile-health.md", title="Compile health")
        assert site.load(SourceFile(path, "page")).url == "/compile-health/"

    def test_root_index_is_home_url(self, site: Site) -> None:
        path = write_page(site.root, "index.md", title="Home")
        assert site.load(SourceFile(path, "page")).url == "/"


class TestAuthors:
    def test_registry(self, site: Site) -> None:
        authors = site.load_authors()
        assert authors["jane"].name == "Jane Doe"
        assert authors["bob"].name == "Bob"

    def test_missing_registry(self, site: Site) -> None:
        site.authors_path.unlink()
        assert site.load_authors() == {}

    def test_malformed_registry(self, site: Site) -> None:
        site.authors_path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(AuthorRegistryError):
            site.load_authors()

    def test_undecodable_registry(self, site: Site) -> None:
        site.authors_path.write_bytes(b"jane:\n  name: J\xe9r\xf4me\n")
        with pytest.raises(AuthorRegistryError, match="authors.yml"):
            site.load_authors()


class TestPaths:
    def test_collection_dirs(self, site: Site) -> None:
        assert site.posts_dir == site.root / "_posts"
        assert site.drafts_dir == site.root / "_drafts"
        assert site.output_dir == site.root / "_site"

    def test_identity_from_config(self, site_root: Path) -> None:
        custom = Site(settings_for(site_root))
        assert custom.identity.title == "Test Blog"
        assert custom.identity.url == "https://blog.example.org"

    def test_relative_outside_root(self, site: Site, tmp_path_factory: pytest.TempPathFactory) -> None:
        other = tmp_path_factory.mktemp("elsewhere") / "x.md"
        assert site.relative(other) == other.as_posix()
