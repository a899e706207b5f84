"""
Recipe Finder - Streamlit Frontend Main Entry Point.

The search page: type ingredients (or upload a photo), set dietary and extra
filters, and browse the ranked results page by page. Opening a recipe stores
it in the session and switches to the recipe detail page.

Searches are debounced by the SearchController. When a search is pending the
page renders the skeleton, waits until it is due, runs it and reruns.

Run with:
    streamlit run streamlit_app/app.py
"""

import sys
import time
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and recipefinder
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import streamlit as st

from recipefinder.controller import MODE_PHOTO
from recipefinder.storage import store_recipe
from ui.components import (
    render_filter_menu,
    render_footer,
    render_mode_selector,
    render_pagination,
    render_photo_uploader,
    render_recipe_list,
    render_search_bar,
    render_skeleton,
)
from ui.feedback import show_empty_state, show_error, show_rate_limited
from ui.layout import page_header
from ui.styles import load_global_styles
from utils.api_client import detect_ingredients, get_health_status
from utils.session import get_controller, get_stored_recipes, is_dark_mode

RECIPE_PAGE = "pages/01_📖_Recipe.py"

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Finder",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="collapsed",
)

load_global_styles(is_dark_mode())

controller = get_controller()


def open_recipe(recipe: dict) -> None:
    stored = store_recipe(recipe, get_stored_recipes())
    st.session_state["selected_recipe_id"] = stored["id"]
    st.session_state["open_recipe_page"] = True


# Navigation cannot happen inside a widget callback
if st.session_state.pop("open_recipe_page", False):
    st.switch_page(RECIPE_PAGE)

with st.sidebar:
    st.markdown("### 🍳 **Recipe Finder**")
    with st.expander("System status", expanded=False):
        if get_health_status():
            st.success("🟢 API online")
        else:
            st.error("🔴 API offline / unreachable")

page_header("Recipe Finder", subtitle="Find recipes with the ingredients you already have.")

render_mode_selector(controller)

if controller.mode == MODE_PHOTO:
    render_photo_uploader(controller, detect_ingredients)
else:
    col_search, col_filters = st.columns([5, 1], vertical_alignment="bottom")
    with col_search:
        render_search_bar(controller)
    with col_filters:
        render_filter_menu(controller)

if controller.is_rate_limited:
    show_rate_limited(controller.error_message, controller.rate_limit_seconds_left)
elif controller.recipes:
    render_recipe_list(controller.recipes, controller.total_results, open_recipe)
    render_pagination(controller)
elif controller.is_error and not controller.has_pending:
    show_error(controller.error_message)
elif not controller.has_pending and not controller.ingredients_text.strip():
    show_empty_state(
        "Start with what's in your fridge",
        subtitle="Type a few ingredients, or switch to Photo and let us detect them.",
    )

delay = controller.seconds_until_due()
if delay is not None:
    render_skeleton()
    time.sleep(delay)
    with st.spinner("Searching recipes…"):
        controller.run_pending()
    st.rerun()

render_footer()
