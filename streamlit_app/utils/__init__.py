"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Proxy API communication
- session: Session state helpers (search controller, stored recipes, theme)
"""
