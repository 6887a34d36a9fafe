"""Tests for archive pagination."""

import pytest

from blogctl.domain.pagination import page_url, page_window, paginate


class TestPaginate:
    def test_splits_items(self) -> None:
        pages = paginate(list(range(12)), 5)
        assert [p.items for p in pages] == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9], [10, 11]]
        assert all(p.total_pages == 3 for p in pages)
        assert all(p.total_items == 12 for p in pages)

    def test_empty_yields_one_page(self) -> None:
        pages = paginate([], 5)
        assert len(pages) == 1
        assert pages[0].items == []
        assert pages[0].next_url is None

    def test_exact_multiple(self) -> None:
        assert len(paginate(list(range(10)), 5)) == 2

    def test_invalid_per_page(self) -> None:
        with pytest.raises(ValueError, match="per_page"):
            paginate([1], 0)

    def test_urls_and_neighbours(self) -> None:
        first, second, third = paginate(list(range(11)), 5, base_url="/tag/cpp/")
        assert first.url == "/tag/cpp/"
        assert second.url == "/tag/cpp/page2/"
        assert first.previous_url is None
        assert first.next_url == "/tag/cpp/page2/"
        assert second.previous_url == "/tag/cpp/"
        assert third.next_page is None
        assert third.previous_page == 2


class TestPageUrl:
    def test_first_page_is_base(self) -> None:
        assert page_url("/", 1) == "/"

    def test_later_pages(self) -> None:
        assert page_url("/", 3) == "/page3/"
        assert page_url("/author/jane", 2) == "/author/jane/page2/"


class TestPageWindow:
    def test_single(self) -> None:
        assert page_window(1, 1) == [1]

    def test_small_total_has_no_gaps(self) -> None:
        assert page_window(2, 4) == [1, 2, 3, 4]

    def test_gaps_both_sides(self) -> None:
        assert page_window(6, 10) == [1, None, 4, 5, 6, 7, 8, None, 10]

    def test_gap_at_end_only(self) -> None:
        assert page_window(1, 10) == [1, 2, 3, None, 10]

    def test_window_property(self) -> None:
        pages = paginate(list(range(50)), 5)
        assert pages[9].window == [1, None, 8, 9, 10]
