"""
Recipe Finder UI components.

Widgets write to the search controller through on_change/on_click callbacks,
which Streamlit runs before the script reruns. The page then renders from
controller state only.
"""

import html
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import streamlit as st

from recipefinder.controller import MODE_PHOTO, MODE_RECIPE, SearchController
from recipefinder.models import DIETARY_FLAGS
from recipefinder.pagination import pagination_state
from ui.layout import card, section
from utils.session import is_dark_mode, set_dark_mode

DIETARY_LABELS = {
    "vegetarian": "Vegetarian",
    "vegan": "Vegan",
    "glutenFree": "Gluten Free",
    "dairyFree": "Dairy Free",
    "lowCarb": "Low Carb",
}

COOKING_TIME_OPTIONS = ["any", "under-30", "30-60", "over-60"]
CUISINE_OPTIONS = ["any", "american", "asian", "indian", "italian", "mediterranean", "mexican"]
MEAL_TYPE_OPTIONS = ["any", "breakfast", "lunch", "dinner", "snack", "dessert"]

EXTRA_FILTER_WIDGETS = [
    ("cookingTime", "Cooking time", COOKING_TIME_OPTIONS),
    ("cuisine", "Cuisine", CUISINE_OPTIONS),
    ("mealType", "Meal type", MEAL_TYPE_OPTIONS),
]

INGREDIENT_PREVIEW_COUNT = 5
SKELETON_CARDS = 3


def _label(value: str) -> str:
    return "Any" if value == "any" else value.replace("-", " ").capitalize()


def render_mode_selector(controller: SearchController) -> None:
    """Switch between typing ingredients and uploading a photo."""
    labels = {MODE_RECIPE: "🥕 Ingredients", MODE_PHOTO: "📷 Photo"}

    def _on_change() -> None:
        controller.set_mode(st.session_state["search_mode"])

    st.session_state["search_mode"] = controller.mode
    st.radio(
        "Search mode",
        options=[MODE_RECIPE, MODE_PHOTO],
        format_func=labels.get,
        key="search_mode",
        horizontal=True,
        label_visibility="collapsed",
        on_change=_on_change,
    )


def render_search_bar(controller: SearchController) -> None:
    """Ingredient input with a search button; the button is disabled while loading or rate limited."""

    def _on_text_change() -> None:
        controller.set_ingredients(st.session_state["ingredients_input"])

    def _on_submit() -> None:
        controller.set_ingredients(st.session_state["ingredients_input"])
        controller.submit()

    if st.session_state.get("ingredients_input") != controller.ingredients_text:
        st.session_state["ingredients_input"] = controller.ingredients_text

    col_input, col_button = st.columns([5, 1], vertical_alignment="bottom")
    with col_input:
        st.text_input(
            "Ingredients",
            key="ingredients_input",
            placeholder="e.g. chicken, rice, garlic",
            help="Separate ingredients with commas or spaces. With 3 or more ingredients every one must match.",
            on_change=_on_text_change,
        )
    with col_button:
        st.button(
            "Searching…" if controller.loading else "Search",
            type="primary",
            use_container_width=True,
            disabled=not controller.can_search,
            on_click=_on_submit,
        )


def render_filter_menu(controller: SearchController) -> None:
    """Dietary toggles and extra filters in a popover."""

    def _sync_toggles() -> None:
        for flag in DIETARY_FLAGS:
            st.session_state[f"diet_{flag}"] = controller.dietary_filters[flag]

    def _on_toggle(flag: str) -> None:
        controller.toggle_dietary_filter(flag)
        _sync_toggles()

    def _on_extra(name: str) -> None:
        controller.set_extra_filter(name, st.session_state[f"extra_{name}"])

    def _on_clear() -> None:
        controller.reset_filters()
        _sync_toggles()
        for name, _, _ in EXTRA_FILTER_WIDGETS:
            st.session_state[f"extra_{name}"] = "any"

    active = any(controller.dietary_filters.values()) or any(
        value != "any" for value in controller.extra_filters.values()
    )

    # Widget values live in session_state so callbacks can update them
    for flag in DIETARY_FLAGS:
        if f"diet_{flag}" not in st.session_state:
            st.session_state[f"diet_{flag}"] = controller.dietary_filters[flag]
    for name, _, options in EXTRA_FILTER_WIDGETS:
        if st.session_state.get(f"extra_{name}") not in options:
            st.session_state[f"extra_{name}"] = controller.extra_filters.get(name, "any")

    with st.popover("Filters •" if active else "Filters", use_container_width=True):
        st.markdown("**Dietary Preferences**")
        for flag in DIETARY_FLAGS:
            st.toggle(
                DIETARY_LABELS[flag],
                key=f"diet_{flag}",
                on_change=_on_toggle,
                args=(flag,),
            )

        for name, label, options in EXTRA_FILTER_WIDGETS:
            st.selectbox(
                label,
                options=options,
                format_func=_label,
                key=f"extra_{name}",
                on_change=_on_extra,
                args=(name,),
            )

        if active:
            st.button("Clear filters", use_container_width=True, on_click=_on_clear)


def render_photo_uploader(controller: SearchController, detector: Callable[[Any], Dict[str, Any]]) -> None:
    """Upload a food photo and search for the ingredients detected in it."""
    uploaded = st.file_uploader("Upload a photo of your ingredients", type=["jpg", "jpeg", "png", "webp"])
    if uploaded is None:
        return

    st.image(uploaded, use_container_width=True)
    if st.button("Detect ingredients", type="primary", disabled=not controller.can_search):
        with st.spinner("Detecting ingredients…"):
            detected = controller.detect_and_search(detector, uploaded)
        if detected:
            st.rerun()


def _match_bar(recipe: Dict[str, Any]) -> str:
    percentage = float(recipe.get("matchPercentage") or 0)
    color = "#34a853" if percentage > 80 else "#fbbc04" if percentage > 50 else "#fa7b17"
    total = len(recipe.get("searchIngredients") or []) or recipe.get("matchScore")
    return (
        f'<div class="rf-match"><div style="width: {percentage:.0f}%; background-color: {color};"></div></div>'
        f'<div class="rf-match-caption">{recipe.get("matchScore")} of {total} ingredients matched</div>'
    )


def render_recipe_card(recipe: Dict[str, Any], on_open: Callable[[Dict[str, Any]], None]) -> None:
    """
    Render one search result.

    Args:
        recipe: Processed recipe dictionary
        on_open: Called with the recipe when "View recipe" is clicked
    """
    ingredients = [str(i) for i in recipe.get("ingredients") or []]
    preview = ", ".join(ingredients[:INGREDIENT_PREVIEW_COUNT])
    if len(ingredients) > INGREDIENT_PREVIEW_COUNT:
        preview += f" +{len(ingredients) - INGREDIENT_PREVIEW_COUNT} more"

    pills = "".join(
        f'<span class="rf-pill">{html.escape(str(recipe[key]))}</span>'
        for key in ("cuisine", "mealType", "cookingTime")
        if recipe.get(key)
    )

    with card():
        st.markdown(f"#### {recipe.get('title') or 'Untitled recipe'}")
        if pills:
            st.markdown(pills, unsafe_allow_html=True)
        st.markdown(f'<div class="rf-ingredients">{html.escape(preview)}</div>', unsafe_allow_html=True)
        if recipe.get("matchScore"):
            st.markdown(_match_bar(recipe), unsafe_allow_html=True)
        st.button(
            "View recipe",
            key=f"open_{recipe.get('id')}",
            on_click=on_open,
            args=(recipe,),
        )


def render_recipe_list(
    recipes: List[Dict[str, Any]],
    total_results: int,
    on_open: Callable[[Dict[str, Any]], None],
) -> None:
    """Render result cards in a two-column grid."""
    st.caption(f"{total_results} recipe{'s' if total_results != 1 else ''} found")
    columns = st.columns(2)
    for index, recipe in enumerate(recipes):
        with columns[index % 2]:
            render_recipe_card(recipe, on_open)


def render_skeleton(cards: int = SKELETON_CARDS) -> None:
    """Placeholder cards shown while a search is pending or loading."""
    line = '<div class="rf-skeleton-line" style="width: {}%;"></div>'
    block = '<div class="rf-skeleton">' + "".join(line.format(w) for w in (60, 90, 75)) + "</div>"
    st.markdown(block * cards, unsafe_allow_html=True)


def render_pagination(controller: SearchController) -> None:
    """First/previous/numbered/next/last page buttons."""
    if controller.total_pages <= 1:
        return

    current = controller.current_page
    last = controller.total_pages
    enabled = pagination_state(current, last)
    numbers = controller.page_numbers
    disabled = not controller.can_search

    columns = st.columns(len(numbers) + 4)
    controls = [("«", 1, enabled["first"]), ("‹", current - 1, enabled["prev"])]
    controls += [(str(n), n, n != current) for n in numbers]
    controls += [("›", current + 1, enabled["next"]), ("»", last, enabled["last"])]

    for column, (label, page, is_enabled) in zip(columns, controls):
        with column:
            st.button(
                label,
                key=f"page_{label}_{page}",
                disabled=disabled or not is_enabled,
                type="primary" if label == str(current) else "secondary",
                use_container_width=True,
                on_click=controller.set_page,
                args=(page,),
            )


def nutrition_frame(nutrition: Optional[Dict[str, Any]]) -> Optional[pd.DataFrame]:
    """Nutrition facts as a two-column table, or None when there are none."""
    if not nutrition:
        return None
    rows = [
        {"Nutrient": key.replace("_", " ").capitalize(), "Amount": str(value)}
        for key, value in nutrition.items()
        if value not in (None, "")
    ]
    return pd.DataFrame(rows) if rows else None


def render_recipe_detail(recipe: Dict[str, Any]) -> None:
    """Full recipe view: match bar, ingredients, directions and nutrition."""
    st.markdown(f"## {recipe.get('title') or 'Untitled recipe'}")

    if recipe.get("matchScore"):
        st.markdown(_match_bar(recipe), unsafe_allow_html=True)

    col_ingredients, col_directions = st.columns([2, 3], gap="large")
    with col_ingredients:
        section("Ingredients")
        st.markdown("\n".join(f"- {ingredient}" for ingredient in recipe.get("ingredients") or []))
    with col_directions:
        section("Directions")
        st.markdown("\n".join(f"{n}. {step}" for n, step in enumerate(recipe.get("directions") or [], start=1)))

    frame = nutrition_frame(recipe.get("nutrition"))
    if frame is not None:
        section("Nutrition")
        st.dataframe(frame, hide_index=True, use_container_width=True)


def render_footer() -> None:
    """Footer with the dark mode toggle."""

    def _on_theme_change() -> None:
        set_dark_mode(st.session_state["dark_mode_toggle"])

    st.markdown('<div class="rf-footer">Recipe Finder</div>', unsafe_allow_html=True)
    _, col_toggle, _ = st.columns([2, 1, 2])
    with col_toggle:
        st.toggle("Dark mode", value=is_dark_mode(), key="dark_mode_toggle", on_change=_on_theme_change)
