"""
UI Styling and Components Module.

This module provides global CSS styling and reusable UI components
for the Recipe Finder Streamlit app.
"""

from ui.layout import card, page_header, section
from ui.styles import load_global_styles

__all__ = [
    "card",
    "load_global_styles",
    "page_header",
    "section",
]
