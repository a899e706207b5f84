"""
Keyword-based dietary filtering for recipes.

Each dietary flag excludes recipes whose ingredient lines contain one of a set
of disallowed keywords (matched as whole words, see
recipefinder.matching.contains_forbidden_ingredients):

- vegetarian: no meat, fish, seafood or gelatin
- vegan: vegetarian rules plus no dairy, eggs or honey
- glutenFree: no wheat, flour, bread, pasta, etc.
- dairyFree: no milk, cheese, butter, cream, etc.
- lowCarb: no sugar, rice, pasta, bread, potatoes, etc.

This is a simple heuristic suitable for a demo. Ingredient lines such as
"vegan cheese" will still be flagged as dairy.
"""

from typing import Any, Dict, List, Mapping, Optional

from recipefinder.matching import contains_forbidden_ingredients
from recipefinder.models import DIETARY_FLAGS

MEAT_INGREDIENTS = [
    "beef", "pork", "lamb", "chicken", "turkey", "bacon", "ham", "sausage",
    "veal", "venison", "duck", "goose", "meat", "steak", "ribs", "brisket",
    "prosciutto", "salami", "pepperoni", "jerky", "hamburger",
]

NON_VEGETARIAN_INGREDIENTS = MEAT_INGREDIENTS + [
    "fish", "salmon", "tuna", "shrimp", "crab", "lobster",
    "clam", "mussel", "oyster", "scallop", "seafood", "anchovy", "caviar",
    "squid", "octopus", "gelatin",
]

DAIRY_INGREDIENTS = [
    "milk", "cheese", "butter", "cream", "yogurt", "dairy", "whey",
    "lactose", "parmesan", "mozzarella", "cheddar", "ice cream",
]

ANIMAL_PRODUCT_INGREDIENTS = ["egg", "eggs", "honey", "mayonnaise"]

GLUTEN_INGREDIENTS = [
    "wheat", "flour", "bread", "breadcrumbs", "pasta", "spaghetti", "noodles",
    "barley", "rye", "couscous", "semolina", "bulgur", "seitan", "tortilla",
    "crackers", "beer",
]

HIGH_CARB_INGREDIENTS = [
    "sugar", "rice", "pasta", "spaghetti", "noodles", "bread", "flour",
    "potato", "potatoes", "corn", "tortilla", "oats", "honey", "syrup",
]


def _forbidden_lists(filters: Mapping[str, bool]) -> List[List[str]]:
    lists: List[List[str]] = []
    if filters.get("vegetarian"):
        lists.append(NON_VEGETARIAN_INGREDIENTS)
    if filters.get("vegan"):
        lists.extend([NON_VEGETARIAN_INGREDIENTS, DAIRY_INGREDIENTS, ANIMAL_PRODUCT_INGREDIENTS])
    if filters.get("glutenFree"):
        lists.append(GLUTEN_INGREDIENTS)
    if filters.get("dairyFree"):
        lists.append(DAIRY_INGREDIENTS)
    if filters.get("lowCarb"):
        lists.append(HIGH_CARB_INGREDIENTS)
    return lists


def apply_dietary_filters(
    recipes: Optional[List[Dict[str, Any]]],
    filters: Mapping[str, bool],
) -> List[Dict[str, Any]]:
    """
    Drop recipes that violate any enabled dietary flag.

    Args:
        recipes: Recipe dictionaries (None is treated as no recipes)
        filters: Mapping of dietary flag name to bool, e.g. {"vegan": True}

    Returns:
        The recipes that pass every enabled flag, in their original order

    Examples:
        >>> apply_dietary_filters([{"ingredients": ["beef mince"]}], {"vegetarian": True})
        []
        >>> apply_dietary_filters(None, {})
        []
    """
    if not recipes:
        return []

    lists = _forbidden_lists(filters)
    if not lists:
        return list(recipes)

    return [
        recipe for recipe in recipes
        if not any(contains_forbidden_ingredients(recipe, forbidden) for forbidden in lists)
    ]


def active_filters(filters: Mapping[str, bool]) -> List[str]:
    """Names of the enabled flags in display order (the backend's "dietary" list)."""
    return [name for name in DIETARY_FLAGS if filters.get(name)]


def toggle_filter(filters: Mapping[str, bool], name: str) -> Dict[str, bool]:
    """
    Return a copy of filters with one flag flipped.

    Turning vegan on also turns vegetarian on; turning vegan off leaves
    vegetarian as it was.

    Raises:
        ValueError: If name is not a known dietary flag
    """
    if name not in DIETARY_FLAGS:
        raise ValueError(f"Unknown dietary filter: '{name}'. Valid options: {', '.join(DIETARY_FLAGS)}")

    updated = {flag: bool(filters.get(flag, False)) for flag in DIETARY_FLAGS}
    updated[name] = not updated[name]

    if name == "vegan" and updated["vegan"]:
        updated["vegetarian"] = True

    return updated
