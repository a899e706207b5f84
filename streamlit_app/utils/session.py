"""
Session management utilities for Streamlit pages.

The search controller and the recipes the user opened live in st.session_state,
so they survive reruns and navigation between the search page and the recipe
detail page within one browser session.
"""

from typing import Any, Dict, List

import streamlit as st

from recipefinder.controller import SearchController
from utils.api_client import fetch_recipes

CONTROLLER_KEY = "search_controller"
STORED_RECIPES_KEY = "recipeData"
THEME_KEY = "dark_mode"


def get_controller() -> SearchController:
    """
    Get or create the search controller stored in st.session_state.

    Returns:
        SearchController wired to the proxy's /api/rawSearch route
    """
    if CONTROLLER_KEY not in st.session_state:
        st.session_state[CONTROLLER_KEY] = SearchController(fetcher=fetch_recipes)
    return st.session_state[CONTROLLER_KEY]


def get_stored_recipes() -> List[Dict[str, Any]]:
    """Recipes opened in this session (see recipefinder.storage)."""
    if STORED_RECIPES_KEY not in st.session_state:
        st.session_state[STORED_RECIPES_KEY] = []
    return st.session_state[STORED_RECIPES_KEY]


def is_dark_mode() -> bool:
    return st.session_state.get(THEME_KEY, True)


def set_dark_mode(enabled: bool) -> None:
    st.session_state[THEME_KEY] = enabled
