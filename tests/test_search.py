"""
Tests for the search payload builder and result post-processing.
"""

from recipefinder.search import build_search_payload, no_results_message, normalize_search_payload, process_results

NO_FILTERS = {"vegetarian": False, "vegan": False, "glutenFree": False, "dairyFree": False, "lowCarb": False}


class TestBuildSearchPayload:
    """Test the payload sent to the recipe backend."""

    def test_two_terms(self):
        payload = build_search_payload(["chicken", "rice"], NO_FILTERS)

        assert payload == {
            "ingredients": ["chicken", "rice"],
            "dietary": [],
            "matchAll": False,
            "page": 1,
            "page_size": 10,
            "max_results": 100,
        }

    def test_three_terms_match_all(self):
        payload = build_search_payload(["chicken", "rice", "garlic"], NO_FILTERS)
        assert payload["matchAll"] is True

    def test_dietary_and_extras(self):
        filters = dict(NO_FILTERS, vegetarian=True, lowCarb=True)
        extras = {"cuisine": "italian", "mealType": "any", "cookingTime": ""}

        payload = build_search_payload(["tomato"], filters, extras, page=3)

        assert payload["dietary"] == ["vegetarian", "lowCarb"]
        assert payload["cuisine"] == "italian"
        assert "mealType" not in payload
        assert "cookingTime" not in payload
        assert payload["page"] == 3


class TestNormalizeSearchPayload:
    """Test normalisation of raw search bodies."""

    def test_defaults(self):
        assert normalize_search_payload({}) == {
            "ingredients": [],
            "dietary": [],
            "matchAll": False,
            "page": 1,
            "page_size": 10,
            "max_results": 100,
        }

    def test_lenient_coercion(self):
        """Test that malformed values fall back instead of failing."""
        payload = normalize_search_payload(
            {"ingredients": "chicken", "dietary": None, "matchAll": 1, "page": "2", "page_size": "x", "cuisine": ""}
        )

        assert payload["ingredients"] == []
        assert payload["dietary"] == []
        assert payload["matchAll"] is True
        assert payload["page"] == 2
        assert payload["page_size"] == 10
        assert "cuisine" not in payload

    def test_non_finite_paging_values_fall_back(self):
        payload = normalize_search_payload({"page": float("inf"), "page_size": float("nan"), "max_results": float("-inf")})

        assert payload["page"] == 1
        assert payload["page_size"] == 10
        assert payload["max_results"] == 100

    def test_non_positive_paging_values_fall_back(self):
        payload = normalize_search_payload({"page": -5, "page_size": 0, "max_results": "-1"})

        assert payload["page"] == 1
        assert payload["page_size"] == 10
        assert payload["max_results"] == 100

    def test_unknown_keys_pass_through(self):
        payload = normalize_search_payload({"ingredients": ["rice"], "sort": "popular"})
        assert payload["sort"] == "popular"


class TestProcessResults:
    """Test filtering, dietary rules and ranking of backend recipes."""

    DATA = {
        "recipes": [
            {"id": 1, "title": "Chicken salad", "ingredients": ["chicken breast", "lettuce"]},
            {"id": 2, "title": "Chicken rice", "ingredients": ["chicken thighs", "rice"]},
            {"id": 3, "title": "Fruit bowl", "ingredients": ["banana", "apple"]},
            {"title": "Fried rice", "ingredients": ["rice", "egg", "soy sauce"]},
        ],
        "pagination": {"page": 1, "pages": 1},
    }

    def test_filter_and_rank(self):
        result = process_results(self.DATA, ["chicken", "rice"], NO_FILTERS)

        assert [r["title"] for r in result] == ["Chicken rice", "Chicken salad", "Fried rice"]
        assert result[0]["matchScore"] == 2
        assert result[2]["id"].startswith("recipe-2-")

    def test_dietary_filter_applied(self):
        result = process_results(self.DATA, ["chicken", "rice"], dict(NO_FILTERS, vegetarian=True))
        assert [r["title"] for r in result] == ["Fried rice"]

    def test_empty_response(self):
        assert process_results({}, ["chicken"], NO_FILTERS) == []
        assert process_results(None, ["chicken"], NO_FILTERS) == []


class TestNoResultsMessage:
    def test_without_filters(self):
        assert no_results_message(["chicken"], NO_FILTERS) == (
            "No recipes found with any of these ingredients. Try different ingredients or filters."
        )

    def test_with_filters(self):
        message = no_results_message(["a", "b", "c"], dict(NO_FILTERS, vegan=True))
        assert message.startswith("No recipes found with all of these ingredients matching your dietary preferences (vegan).")
