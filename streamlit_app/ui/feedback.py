"""
Standardized feedback utilities for consistent error, empty, and loading states.

Provides reusable components for displaying errors, rate-limit notices, empty
states and loading indicators on both pages.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_rate_limited(message: str, seconds_left: Optional[float] = None) -> None:
    """
    Display the rate-limit notice shown while searching is disabled.

    Args:
        message: Message from the search controller
        seconds_left: Remaining backoff in seconds, if known
    """
    st.warning(f"⏳ {message}")
    if seconds_left is not None and seconds_left > 0:
        st.caption(f"Search is available again in about {int(seconds_left) + 1} seconds.")


def show_empty_state(title: str, subtitle: Optional[str] = None) -> None:
    """
    Display a standardized empty state.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Detecting ingredients…"):
            # Do work here
            pass

    Args:
        label: Spinner label text (default: "Working…")
    """
    with st.spinner(label):
        yield
