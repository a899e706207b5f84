"""
Recipe ids, session storage and shareable links.

Backend recipes do not always carry an id, but the UI needs one to open a
recipe on its own page. Recipes opened by the user are kept in a per-session
list (Streamlit session_state) and the share link also embeds the recipe as
URL-encoded JSON, so a shared link still works in a fresh session.
"""

import json
import logging
import time
from typing import Any, Dict, List, MutableSequence, Optional
from urllib.parse import quote, urlencode

logger = logging.getLogger(__name__)

# Streamlit page path of the recipe detail page
RECIPE_PAGE_PATH = "/Recipe"


def _now_ms() -> int:
    return int(time.time() * 1000)


def ensure_recipes_have_ids(recipes: Optional[List[Dict[str, Any]]]) -> Optional[List[Dict[str, Any]]]:
    """Give every recipe without an id a generated "recipe-{index}-{ms}" id."""
    if not recipes:
        return recipes

    stamp = _now_ms()
    return [
        recipe if recipe.get("id") else {**recipe, "id": f"recipe-{index}-{stamp}"}
        for index, recipe in enumerate(recipes)
    ]


def store_recipe(recipe: Dict[str, Any], stored: MutableSequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Add a recipe to the session's stored recipes unless one with the same id
    is already there.

    Returns:
        The recipe, with a generated id if it had none
    """
    if not recipe.get("id"):
        recipe = {**recipe, "id": f"recipe-{_now_ms()}"}

    if not any(existing.get("id") == recipe["id"] for existing in stored):
        stored.append(recipe)

    return recipe


def get_recipe_url(recipe: Dict[str, Any], stored: MutableSequence[Dict[str, Any]]) -> str:
    """
    Shareable relative URL of the recipe detail page.

    The recipe is stored first (which also assigns an id) and embedded in the
    "data" query parameter.
    """
    recipe = store_recipe(recipe, stored)
    query = urlencode({"id": recipe["id"], "data": json.dumps(recipe)}, quote_via=quote)
    return f"{RECIPE_PAGE_PATH}?{query}"


def load_recipe(
    recipe_id: Optional[str],
    stored: List[Dict[str, Any]],
    data: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Find a recipe for the detail page.

    Looks in the session's stored recipes first, then parses the "data"
    query parameter, which Streamlit has already URL-decoded. Returns None
    when neither yields a recipe.
    """
    if recipe_id:
        for recipe in stored:
            if str(recipe.get("id")) == str(recipe_id):
                return recipe

    if data:
        try:
            decoded = json.loads(data)
        except (TypeError, ValueError) as e:
            logger.warning("Failed to parse recipe data from URL: %s", e)
            return None
        if isinstance(decoded, dict):
            return decoded

    return None


def with_default_directions(recipe: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the recipe with placeholder directions if it has none."""
    if recipe.get("directions"):
        return dict(recipe)

    title = recipe.get("title") or "this recipe"
    return {
        **recipe,
        "directions": [
            f"Prepare all ingredients for {title}.",
            "Preheat your cooking appliance to the appropriate temperature.",
            "Combine ingredients according to your preference.",
            "Cook until done to your liking.",
            "Serve and enjoy!",
        ],
    }
