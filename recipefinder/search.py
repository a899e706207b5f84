"""
Search pipeline: build the payload sent to the recipe backend and post-process
the recipes it returns.

Post-processing runs on the client because the backend's own ingredient
matching is loose and it knows nothing about most dietary flags:

1. Filter by ingredient terms (any/all policy, see recipefinder.matching)
2. Drop recipes that break an enabled dietary flag
3. Rank by number of matched terms
4. Make sure every recipe has an id
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from recipefinder.dietary import active_filters, apply_dietary_filters
from recipefinder.matching import (
    filter_recipes_by_ingredients,
    match_strategy,
    rank_recipes_by_ingredient_matches,
)
from recipefinder.models import DEFAULT_MAX_RESULTS, DEFAULT_PAGE_SIZE, SearchRequest
from recipefinder.storage import ensure_recipes_have_ids

logger = logging.getLogger(__name__)

# Value of an extra filter meaning "not set"
ANY = "any"

EXTRA_FILTERS = ("cookingTime", "cuisine", "mealType")


def normalize_search_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Normalise an incoming search body into the backend's payload shape.

    Non-list ingredients/dietary become empty lists, matchAll becomes a bool,
    paging values fall back to page 1 / page_size 10 / max_results 100 and the
    optional extras are only kept when truthy. Unknown keys pass through.
    """
    return SearchRequest.model_validate(dict(payload)).to_payload()


def build_search_payload(
    terms: List[str],
    filters: Mapping[str, bool],
    extras: Optional[Mapping[str, str]] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    """
    Build the backend payload for a search.

    Args:
        terms: Parsed ingredient terms
        filters: Dietary flags
        extras: cookingTime/cuisine/mealType selections ("any" means unset)
        page: Page to fetch (1-based)
        page_size: Results per page

    Returns:
        Payload dictionary; matchAll is True for 3 or more terms
    """
    payload: Dict[str, Any] = {
        "ingredients": list(terms),
        "dietary": active_filters(filters),
        "matchAll": match_strategy(terms) == "all",
        "page": page,
        "page_size": page_size,
        "max_results": DEFAULT_MAX_RESULTS,
    }

    for name in EXTRA_FILTERS:
        value = (extras or {}).get(name)
        if value and value != ANY:
            payload[name] = value

    return payload


def process_results(
    data: Optional[Mapping[str, Any]],
    terms: List[str],
    filters: Mapping[str, bool],
) -> List[Dict[str, Any]]:
    """
    Filter, rank and id the recipes of a backend response.

    Args:
        data: Backend response ({"recipes": [...], "pagination": {...}})
        terms: Parsed ingredient terms
        filters: Dietary flags

    Returns:
        Processed recipe dictionaries, best match first
    """
    recipes = list((data or {}).get("recipes") or [])

    matched = filter_recipes_by_ingredients(recipes, terms) or []
    allowed = apply_dietary_filters(matched, filters)
    ranked = rank_recipes_by_ingredient_matches(allowed, terms)

    logger.debug(
        "Processed %d backend recipes: %d matched, %d after dietary filters",
        len(recipes), len(matched), len(allowed),
    )
    return ensure_recipes_have_ids(ranked) or []


def no_results_message(terms: List[str], filters: Mapping[str, bool]) -> str:
    """Message shown when a search returns no recipes after processing."""
    dietary = active_filters(filters)
    preferences = f" matching your dietary preferences ({', '.join(dietary)})" if dietary else ""
    return (
        f"No recipes found with {match_strategy(terms)} of these ingredients{preferences}. "
        "Try different ingredients or filters."
    )
