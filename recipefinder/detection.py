"""
Turn Google Vision label annotations into a short list of ingredients.

Vision returns generic labels ("Food", "Ingredient", "Recipe") next to the
useful ones ("Tomato", "Basil"), and often several variants of the same thing
("Cherry tomato", "Plum tomato"). The processing is:

1. Keep labels with a confidence score of at least MIN_LABEL_SCORE
2. Drop generic food terms (exact, or either one contained in the other)
3. Sort by score, highest first
4. Drop names that describe a dish or setting rather than an ingredient
5. Drop variants of an ingredient that is already kept
6. Title-case the names and keep at most MAX_INGREDIENTS
"""

from typing import Any, Dict, List

MIN_LABEL_SCORE = 0.7
MAX_INGREDIENTS = 10

GENERIC_FOOD_TERMS = [
    "food", "ingredient", "vegetable", "fruit", "meat", "dairy", "grain", "herb", "spice",
    "dish", "meal", "cuisine", "recipe", "breakfast", "lunch", "dinner", "snack",
    "seafood", "produce", "sauce", "syrup", "dessert", "baked good", "appetizer",
    "side dish", "beverage", "ice cream", "seed", "nut", "object",
]

NON_INGREDIENT_MARKERS = ["dish", "cuisine", "product", "setting"]

NO_INGREDIENTS_MESSAGE = "No food ingredients detected. Try uploading a clearer image of food items."


def is_variant_of(ingredient: str, other: str) -> bool:
    """
    True if two names look like variants of the same ingredient.

    Examples:
        >>> is_variant_of("cherry tomato", "tomato")
        True
        >>> is_variant_of("plum tomato", "cherry tomato")
        True
        >>> is_variant_of("basil", "garlic")
        False
    """
    first = ingredient.strip().lower()
    second = other.strip().lower()

    if first in second or second in first:
        return True

    first_words = first.split()
    second_words = second.split()
    return bool(first_words and second_words and first_words[-1] == second_words[-1])


def _is_generic(name: str) -> bool:
    return any(name == term or term in name or name in term for term in GENERIC_FOOD_TERMS)


def _title_case(name: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))


def labels_to_ingredients(label_annotations: List[Dict[str, Any]]) -> List[str]:
    """
    Extract unique ingredient names from Vision labelAnnotations.

    Args:
        label_annotations: Items with "description" and "score" keys

    Returns:
        Up to MAX_INGREDIENTS title-cased ingredient names, most confident first
    """
    labels = [
        {"name": str(label.get("description", "")).lower(), "score": float(label.get("score", 0.0))}
        for label in label_annotations or []
        if float(label.get("score", 0.0)) >= MIN_LABEL_SCORE and label.get("description")
    ]

    labels = [label for label in labels if not _is_generic(label["name"])]
    labels.sort(key=lambda label: label["score"], reverse=True)

    ingredients: List[str] = []
    for label in labels:
        name = label["name"]
        if any(marker in name for marker in NON_INGREDIENT_MARKERS):
            continue
        if any(is_variant_of(existing, name) for existing in ingredients):
            continue
        ingredients.append(_title_case(name))

    return ingredients[:MAX_INGREDIENTS]
