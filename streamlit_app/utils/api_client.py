"""
Proxy API Client Module.

This module is the **single source of truth** for all communication between the
Streamlit UI and the FastAPI proxy (api/main.py).

Key principles:
- Centralized error handling: every failure is raised as RecipeAPIError with a
  code the UI can act on (RATE_LIMITED, VALIDATION_ERROR, NETWORK_ERROR, ...)
- Consistent timeouts
- get_health_status() degrades gracefully and returns None instead of raising

# NOTE: Search and detection errors are raised, not swallowed, because the
    search controller decides what to show (retry countdown, validation
    message, generic error).
"""

from typing import Any, Dict, List, Optional

import requests
import streamlit as st

from api.config import FrontendConfig
from recipefinder.errors import ErrorCode, RecipeAPIError

SEARCH_TIMEOUT_SECONDS = 30
DETECT_TIMEOUT_SECONDS = 60


def get_api_base_url() -> str:
    """
    Get the proxy API base URL.

    Returns:
        API_BASE_URL with trailing slash removed (default: http://localhost:8000)
    """
    return FrontendConfig.get_api_base_url()


def _error_from_response(response: requests.Response) -> RecipeAPIError:
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text

    message = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("detail")
    if not isinstance(message, str) or not message:
        message = f"Request failed with status code {response.status_code}"

    return RecipeAPIError.from_status(
        response.status_code,
        message,
        details=body,
        retry_after=response.headers.get("Retry-After"),
    )


def _post(path: str, timeout: float, **kwargs: Any) -> Dict[str, Any]:
    url = f"{get_api_base_url()}{path}"
    try:
        response = requests.post(url, timeout=timeout, **kwargs)
    except requests.exceptions.Timeout as e:
        raise RecipeAPIError(ErrorCode.NETWORK_ERROR, "The request timed out. Please try again.") from e
    except requests.exceptions.RequestException as e:
        raise RecipeAPIError(
            ErrorCode.NETWORK_ERROR, "Could not connect to the recipe service.", details=str(e)
        ) from e

    if not response.ok:
        raise _error_from_response(response)

    try:
        return response.json()
    except ValueError as e:
        raise RecipeAPIError(ErrorCode.API_ERROR, "The recipe service returned an invalid response.") from e


def fetch_recipes(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Search recipes through the rate-limited proxy route.

    Args:
        payload: Search payload (see recipefinder.search.build_search_payload)

    Returns:
        Backend response: {"recipes": [...], "pagination": {...}}

    Raises:
        RecipeAPIError: On any HTTP or network failure
    """
    return _post("/api/rawSearch", SEARCH_TIMEOUT_SECONDS, json=payload)


def detect_ingredients(uploaded_file: Any) -> Dict[str, Any]:
    """
    Detect ingredients in an uploaded photo.

    Args:
        uploaded_file: Object returned by st.file_uploader (name, type, getvalue())

    Returns:
        {"ingredients": [...], "message": ...}

    Raises:
        RecipeAPIError: On any HTTP or network failure
    """
    files = {
        "image": (
            getattr(uploaded_file, "name", "image.jpg"),
            uploaded_file.getvalue(),
            getattr(uploaded_file, "type", None) or "application/octet-stream",
        )
    }
    return _post("/api/detectIngredients", DETECT_TIMEOUT_SECONDS, files=files)


def search_images(query: str) -> List[Dict[str, Any]]:
    """
    Generate food photos for a recipe title.

    Returns:
        List of {"url": ..., "alt": ...}

    Raises:
        RecipeAPIError: On any HTTP or network failure
    """
    data = _post("/api/imageSearch", DETECT_TIMEOUT_SECONDS, json={"query": query})
    return data.get("images") or []


@st.cache_data(ttl=60)  # Cache for 60 seconds to avoid hitting the proxy on every rerun
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check proxy health by calling GET /api/health.

    Returns:
        The health payload ({"status": "ok", "service": ..., "uptime": ...}),
        or None if the proxy is unreachable or unhealthy.
    """
    try:
        response = requests.get(f"{get_api_base_url()}/api/health", timeout=5)
        response.raise_for_status()
        data = response.json()
    except (requests.exceptions.RequestException, ValueError):
        return None

    return data if data.get("status") == "ok" else None
