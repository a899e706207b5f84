"""
Tests for the in-process search response cache.
"""

from unittest.mock import patch

import pytest

from recipefinder.utils import cache
from recipefinder.utils.cache import (
    clear_cache,
    get_cache_size,
    get_cached_search,
    make_search_cache_key,
    set_cached_search,
)


@pytest.fixture(autouse=True)
def empty_cache():
    clear_cache()
    yield
    clear_cache()


class TestSearchCacheKey:
    """Test cache key normalisation."""

    def test_ingredient_order_and_case_do_not_matter(self):
        first = make_search_cache_key({"ingredients": ["Garlic", "chicken "], "page": 1})
        second = make_search_cache_key({"ingredients": ["chicken", "garlic"], "page": 1})
        assert first == second

    def test_page_is_part_of_key(self):
        first = make_search_cache_key({"ingredients": ["chicken"], "page": 1})
        second = make_search_cache_key({"ingredients": ["chicken"], "page": 2})
        assert first != second

    def test_filters_are_part_of_key(self):
        plain = make_search_cache_key({"ingredients": ["chicken"]})
        vegan = make_search_cache_key({"ingredients": ["chicken"], "dietary": ["vegan"]})
        italian = make_search_cache_key({"ingredients": ["chicken"], "cuisine": "italian"})
        assert len({plain, vegan, italian}) == 3

    def test_defaults_match_explicit_values(self):
        assert make_search_cache_key({"ingredients": ["rice"]}) == make_search_cache_key(
            {"ingredients": ["rice"], "page": 1, "page_size": 10, "max_results": 100}
        )

    def test_extra_keys_are_part_of_key(self):
        """Test that bodies differing only in a pass-through key get separate entries."""
        rating = make_search_cache_key({"ingredients": ["egg"], "sort": "rating"})
        newest = make_search_cache_key({"ingredients": ["egg"], "sort": "newest"})
        plain = make_search_cache_key({"ingredients": ["egg"]})

        assert len({rating, newest, plain}) == 3
        assert rating == make_search_cache_key({"sort": "rating", "ingredients": ["egg"]})

    def test_key_is_hashable(self):
        hash(make_search_cache_key({"ingredients": "not a list"}))


class TestSearchCache:
    """Test storing, expiring and evicting entries."""

    @patch("recipefinder.utils.cache.time")
    def test_hit_within_ttl(self, mock_time):
        mock_time.time.return_value = 1000.0
        set_cached_search("key", {"recipes": []})

        mock_time.time.return_value = 1000.0 + cache.SEARCH_CACHE_TTL_SECONDS - 1
        assert get_cached_search("key") == {"recipes": []}

    @patch("recipefinder.utils.cache.time")
    def test_miss_after_ttl(self, mock_time):
        mock_time.time.return_value = 1000.0
        set_cached_search("key", {"recipes": []})

        mock_time.time.return_value = 1000.0 + cache.SEARCH_CACHE_TTL_SECONDS + 1
        assert get_cached_search("key") is None
        assert get_cache_size() == 0

    def test_unknown_key(self):
        assert get_cached_search("missing") is None

    @patch("recipefinder.utils.cache.time")
    def test_oldest_entry_evicted_when_full(self, mock_time):
        with patch.object(cache, "SEARCH_CACHE_MAX_SIZE", 2):
            mock_time.time.return_value = 1.0
            set_cached_search("first", {"n": 1})
            mock_time.time.return_value = 2.0
            set_cached_search("second", {"n": 2})
            mock_time.time.return_value = 3.0
            set_cached_search("third", {"n": 3})

            assert get_cache_size() == 2
            assert get_cached_search("first") is None
            assert get_cached_search("third") == {"n": 3}
