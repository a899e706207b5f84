"""
Client-side ingredient matching and ranking.

The remote backend already filters recipes by ingredient, but its matching is
loose. This module re-checks every recipe against the user's search terms
with a few text heuristics and ranks the results:

- Short terms (3 characters or less) match anywhere in the ingredient line
- Longer terms must match a whole word, or the start/end of the line at a word
  boundary; terms of 4 characters also fall back to a plain substring test
- With 3 or more terms every term must match ("all" policy), otherwise one
  matching term is enough ("any" policy)

All comparisons are case-insensitive. Recipes are plain dictionaries with at
least an "ingredients" list; helpers never mutate their inputs.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

# Separators used to split an ingredient line into words
_WORD_SPLIT = re.compile(r"\s+|,|;|\(|\)|/|-")

# Number of terms from which every term must match
MATCH_ALL_THRESHOLD = 3


def parse_ingredients(text: Optional[str]) -> List[str]:
    """
    Turn the free-text ingredient input into a list of lowercase terms.

    Comma-separated input is split on commas (so "olive oil, garlic" keeps
    "olive oil" together); otherwise the text is split on spaces.

    Examples:
        >>> parse_ingredients("Chicken rice  garlic")
        ['chicken', 'rice', 'garlic']
        >>> parse_ingredients("olive oil, Garlic,")
        ['olive oil', 'garlic']
        >>> parse_ingredients("   ")
        []
    """
    if not text or not text.strip():
        return []

    separator = "," if "," in text else " "
    terms = [part.strip() for part in text.split(separator)]
    return [term.lower() for term in terms if term]


def _words(ingredient: str) -> List[str]:
    return _WORD_SPLIT.split(ingredient)


def ingredient_matches(recipe_ingredient: str, search_ingredient: str) -> bool:
    """
    Decide whether a recipe ingredient line satisfies a search term.

    Examples:
        >>> ingredient_matches("2 cups Chicken Breast, diced", "chicken")
        True
        >>> ingredient_matches("chickpeas", "chicken")
        False
        >>> ingredient_matches("eggplant", "egg")
        True
    """
    recipe_ing = (recipe_ingredient or "").lower()
    search_ing = (search_ingredient or "").lower()

    if not search_ing:
        return False

    if len(search_ing) <= 3:
        return search_ing in recipe_ing

    escaped = re.escape(search_ing)

    if search_ing in _words(recipe_ing):
        return True
    if re.search(rf"^{escaped}\b", recipe_ing):
        return True
    if re.search(rf"\b{escaped}$", recipe_ing):
        return True
    if re.search(rf"\b{escaped}\b", recipe_ing):
        return True

    # Short ingredients like "beef" or "kale" are accepted anywhere
    return len(search_ing) <= 4 and search_ing in recipe_ing


def contains_forbidden_ingredients(recipe: Dict[str, Any], forbidden: Iterable[str]) -> bool:
    """
    Check whether any ingredient of the recipe contains a forbidden keyword.

    A keyword counts when it is a complete word of the ingredient line, or sits
    at the start or end of the line on a word boundary. Plain substrings do not
    count, so "rice" does not flag "licorice".
    """
    forbidden = [word.lower() for word in forbidden]

    for ingredient in recipe.get("ingredients") or []:
        line = str(ingredient).lower()
        words = _words(line)
        for keyword in forbidden:
            escaped = re.escape(keyword)
            if keyword in words:
                return True
            if re.search(rf"^{escaped}\b", line) or re.search(rf"\b{escaped}$", line):
                return True
    return False


def _recipe_has_term(recipe: Dict[str, Any], term: str) -> bool:
    return any(ingredient_matches(str(ing), term) for ing in recipe.get("ingredients") or [])


def match_strategy(terms: List[str]) -> str:
    """Return "all" when every term must match, "any" otherwise."""
    return "all" if len(terms) >= MATCH_ALL_THRESHOLD else "any"


def filter_recipes_by_ingredients(
    recipes: Optional[List[Dict[str, Any]]],
    terms: Optional[List[str]],
) -> Optional[List[Dict[str, Any]]]:
    """
    Keep the recipes that satisfy the matching policy for the given terms.

    Returns the input unchanged when there are no recipes or no terms.
    """
    if not recipes or not terms:
        return recipes

    if match_strategy(terms) == "all":
        return [r for r in recipes if all(_recipe_has_term(r, t) for t in terms)]
    return [r for r in recipes if any(_recipe_has_term(r, t) for t in terms)]


def rank_recipes_by_ingredient_matches(
    recipes: List[Dict[str, Any]],
    terms: List[str],
) -> List[Dict[str, Any]]:
    """
    Score every recipe by the number of search terms it matches and sort by
    score, highest first. Ties keep their backend order.

    Each returned recipe is a copy with these keys added:
    - matchScore: number of matched terms
    - matchDetails: the matched terms
    - searchIngredients: all search terms
    - matchPercentage: matchScore / len(terms) * 100 (0 without terms)
    """
    ranked = []
    for recipe in recipes or []:
        matched = [term for term in terms if _recipe_has_term(recipe, term)]
        scored = dict(recipe)
        scored["matchScore"] = len(matched)
        scored["matchDetails"] = matched
        scored["searchIngredients"] = list(terms)
        scored["matchPercentage"] = (len(matched) / len(terms) * 100) if terms else 0.0
        ranked.append(scored)

    return sorted(ranked, key=lambda r: r["matchScore"], reverse=True)
