"""
Tests for the pagination helpers.
"""

import pytest

from recipefinder.pagination import build_pagination, get_page_numbers, page_numbers_for, pagination_state


class TestPageNumbers:
    """Test the five-page window."""

    @pytest.mark.parametrize(
        "page,pages,expected",
        [
            (1, 1, [1]),
            (2, 3, [1, 2, 3]),
            (1, 10, [1, 2, 3, 4, 5]),
            (3, 10, [1, 2, 3, 4, 5]),
            (6, 10, [4, 5, 6, 7, 8]),
            (8, 10, [6, 7, 8, 9, 10]),
            (10, 10, [6, 7, 8, 9, 10]),
        ],
    )
    def test_window(self, page, pages, expected):
        assert get_page_numbers(page, pages) == expected

    def test_no_pages(self):
        assert get_page_numbers(1, 0) == []

    def test_backend_page_numbers_take_precedence(self):
        """Explicit page_numbers from the backend are used as is."""
        assert page_numbers_for({"page": 1, "pages": 10, "page_numbers": [1, 2]}) == [1, 2]

    def test_computed_when_backend_omits_them(self):
        assert page_numbers_for({"page": 2, "pages": 3}) == [1, 2, 3]

    def test_no_pagination(self):
        assert page_numbers_for(None) == []


class TestBuildPagination:
    """Test building a pagination block from totals."""

    def test_pages_round_up(self):
        pagination = build_pagination(page=2, page_size=10, total=25)

        assert pagination["pages"] == 3
        assert pagination["has_next"] is True
        assert pagination["has_prev"] is True
        assert pagination["page_numbers"] == [1, 2, 3]

    def test_empty_result(self):
        pagination = build_pagination(page=1, page_size=10, total=0)

        assert pagination["pages"] == 0
        assert pagination["has_next"] is False
        assert pagination["page_numbers"] == []


class TestPaginationState:
    """Test which navigation controls are enabled."""

    def test_first_page(self):
        assert pagination_state(1, 5) == {"first": False, "prev": False, "next": True, "last": True}

    def test_last_page(self):
        assert pagination_state(5, 5) == {"first": True, "prev": True, "next": False, "last": False}

    def test_single_page(self):
        assert not any(pagination_state(1, 1).values())
