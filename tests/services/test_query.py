"""Tests for QueryService."""

from blogctl.infrastructure.site import Site
from blogctl.services.query import QueryService
from tests.conftest import write_draft, write_page, write_post


class TestListPosts:
    def test_newest_first(self, site: Site) -> None:
        write_post(site.root, "old", date="2023-01-01")
        write_post(site.root, "new", date="2024-01-01")
        write_page(site.root, "about.md", title="About")

        result = QueryService(site).list_posts()
        assert result.ok
        assert [i["slug"] for i in result.data["items"]] == ["new", "old"]
        assert result.data["count"] == 2

        first = result.data["items"][0]
        assert first["date"] == "2024-01-01 00:00:00"
        assert first["url"] == "/2024/01/01/new/"
        assert first["path"] == "_posts/2024-01-01-new.md"
        assert first["draft"] is False

    def test_drafts_opt_in(self, site: Site) -> None:
        write_post(site.root, "hello")
        write_draft(site.root, "idea")
        assert [i["slug"] for i in QueryService(site).list_posts().data["items"]] == ["hello"]

        items = QueryService(site).list_posts(drafts=True).data["items"]
        drafts = [i for i in items if i["draft"]]
        assert [i["slug"] for i in drafts] == ["idea"]

    def test_tag_filter_is_case_insensitive(self, site: Site) -> None:
        write_post(site.root, "a", date="2024-01-01", tags=["LLVM"])
        write_post(site.root, "b", date="2024-01-02", tags=["cpp"])
        items = QueryService(site).list_posts(tag="llvm").data["items"]
        assert [i["slug"] for i in items] == ["a"]

    def test_author_filter_uses_default(self, site: Site) -> None:
        write_post(site.root, "mine", date="2024-01-01")
        write_post(site.root, "bobs", date="2024-01-02", author="bob")
        svc = QueryService(site)
        assert [i["slug"] for i in svc.list_posts(author="jane").data["items"]] == ["mine"]
        assert [i["slug"] for i in svc.list_posts(author="bob").data["items"]] == ["bobs"]

    def test_limit(self, site: Site) -> None:
        for day in range(1, 4):
            write_post(site.root, f"p{day}", date=f"2024-01-0{day}")
        items = QueryService(site).list_posts(limit=2).data["items"]
        assert [i["slug"] for i in items] == ["p3", "p2"]

    def test_invalid_files_become_warnings(self, site: Site) -> None:
        write_post(site.root, "good")
        (site.posts_dir / "2024-02-02-bad.md").write_text("no front-matter\n", encoding="utf-8")
        result = QueryService(site).list_posts()
        assert result.ok
        assert [i["slug"] for i in result.data["items"]] == ["good"]
        assert len(result.warnings) == 1
        assert "_posts/2024-02-02-bad.md" in result.warnings[0]


class TestListTags:
    def test_counts_most_used_first(self, site: Site) -> None:
        write_post(site.root, "a", date="2024-01-01", tags=["cpp", "llvm"])
        write_post(site.root, "b", date="2024-01-02", tags=["cpp"])
        write_post(site.root, "c", date="2024-01-03", tags=["Build Systems"])
        result = QueryService(site).list_tags()
        assert result.data["items"] == [
            {"tag": "cpp", "slug": "cpp", "count": 2},
            {"tag": "Build Systems", "slug": "build-systems", "count": 1},
            {"tag": "llvm", "slug": "llvm", "count": 1},
        ]
        assert result.data["count"] == 3

    def test_drafts_not_counted(self, site: Site) -> None:
        write_draft(site.root, "idea", tags=["secret"])
        assert QueryService(site).list_tags().data["items"] == []
