"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, sections and cards.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st


def page_header(title: str, subtitle: Optional[str] = None) -> None:
    """
    Render a centered page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
    """
    subtitle_html = f'<div class="subtitle">{subtitle}</div>' if subtitle else ""
    st.markdown(
        f'<div class="rf-page-header"><h1>{title}</h1>{subtitle_html}</div>',
        unsafe_allow_html=True,
    )


def section(title: str, caption: Optional[str] = None) -> None:
    """
    Render a section header with optional caption.

    Args:
        title: Section title
        caption: Optional caption/help text below title
    """
    st.markdown(f"### {title}")
    if caption:
        st.caption(caption)


@contextmanager
def card():
    """
    Context manager for a bordered card container.

    Usage:
        with card():
            st.write("Card content")
    """
    with st.container(border=True):
        yield
