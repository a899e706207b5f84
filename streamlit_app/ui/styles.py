"""
Global CSS Styling for Recipe Finder.

This module provides load_global_styles() to inject consistent styling across
both pages. Two palettes are supported (dark by default, light via the theme
toggle in the footer); colors are injected as CSS variables so the rules below
stay the same for both.
"""

import streamlit as st

DARK_PALETTE = {
    "bg": "#1f1f1f",
    "surface": "#2e2e2e",
    "border": "#3e3e3e",
    "text": "#e8e8e8",
    "muted": "#a0a0a0",
    "accent": "#8ab4f8",
}

LIGHT_PALETTE = {
    "bg": "#ffffff",
    "surface": "#f6f7f9",
    "border": "#e1e4e8",
    "text": "#1f1f1f",
    "muted": "#5f6368",
    "accent": "#1a73e8",
}


def load_global_styles(dark_mode: bool = True) -> None:
    """
    Inject global CSS styles for the Recipe Finder app.

    This function:
    - Sets the color palette for the selected theme
    - Styles recipe cards, match bars and pills
    - Provides the pulsing skeleton used while a search is loading
    - Styles the footer
    """
    palette = DARK_PALETTE if dark_mode else LIGHT_PALETTE
    variables = "\n".join(f"            --rf-{name}: {value};" for name, value in palette.items())

    css = f"""
    <style>
        :root {{
{variables}
        }}

        .stApp {{
            background-color: var(--rf-bg) !important;
            color: var(--rf-text) !important;
        }}

        h1, h2, h3, h4, h5, h6 {{
            font-weight: 600 !important;
            color: var(--rf-text) !important;
        }}

        /* Buttons - rounded, matching the search bar */
        .stButton > button {{
            border-radius: 16px !important;
            font-weight: 500 !important;
        }}

        /* Page header */
        .rf-page-header {{
            text-align: center;
            margin-bottom: 1.5rem;
        }}

        .rf-page-header .subtitle {{
            color: var(--rf-muted);
            font-size: 1rem;
        }}

        /* Recipe card */
        .rf-card {{
            border-radius: 12px;
            padding: 1rem 1.25rem;
            background-color: var(--rf-surface);
            border: 1px solid var(--rf-border);
            margin-bottom: 1rem;
        }}

        .rf-card h4 {{
            margin: 0 0 0.5rem 0;
        }}

        .rf-ingredients {{
            color: var(--rf-muted);
            font-size: 0.9rem;
        }}

        /* Match bar */
        .rf-match {{
            height: 6px;
            border-radius: 3px;
            background-color: var(--rf-border);
            margin: 0.5rem 0 0.25rem 0;
        }}

        .rf-match > div {{
            height: 100%;
            border-radius: 3px;
        }}

        .rf-match-caption {{
            font-size: 0.8rem;
            color: var(--rf-muted);
        }}

        /* Pills */
        .rf-pill {{
            display: inline-block;
            padding: 0.15rem 0.6rem;
            border-radius: 999px;
            background: var(--rf-border);
            color: var(--rf-text);
            font-size: 0.75rem;
            margin-right: 0.25rem;
        }}

        /* Skeleton loader */
        @keyframes rf-pulse {{
            0% {{ opacity: 0.6; }}
            50% {{ opacity: 1; }}
            100% {{ opacity: 0.6; }}
        }}

        .rf-skeleton {{
            border-radius: 12px;
            background-color: var(--rf-surface);
            border: 1px solid var(--rf-border);
            padding: 1rem 1.25rem;
            margin-bottom: 1rem;
            animation: rf-pulse 1.5s ease-in-out infinite;
        }}

        .rf-skeleton-line {{
            height: 12px;
            border-radius: 6px;
            background-color: var(--rf-border);
            margin: 0.5rem 0;
        }}

        /* Footer */
        .rf-footer {{
            border-top: 1px solid var(--rf-border);
            margin-top: 2rem;
            padding-top: 1rem;
            text-align: center;
            font-size: 14px;
            color: var(--rf-muted);
        }}
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
