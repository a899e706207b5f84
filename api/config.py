"""
Configuration management for Recipe Finder.

This module centralizes environment variable loading from .env file at project root.
It should be imported early in both the proxy (api/main.py) and the frontend
(streamlit_app/app.py) to ensure .env is loaded before any other code accesses
environment variables.

In production .env will not exist; load_dotenv() is safe to call and will no-op,
and the platform's environment variables are used instead.

Environment Variables:
- GOOGLE_CLOUD_PROJECT_ID: Required for ingredient detection and image search
- GOOGLE_APPLICATION_CREDENTIALS_JSON: Required for ingredient detection and image
  search (service-account key as a JSON string)
- NEXT_PUBLIC_BACKEND_URL: Optional, recipe backend base URL (RECIPE_BACKEND_URL
  is accepted as an alias)
- API_BASE_URL: Optional, proxy URL used by the Streamlit UI (defaults to
  http://localhost:8000)
- RATE_LIMIT_MAX_TOKENS: Optional, token bucket size for /api/rawSearch (default 10)
- RATE_LIMIT_REFILL_SECONDS: Optional, seconds per refilled token (default 6)
- SEARCH_CACHE_TTL_SECONDS: Optional, proxy search cache TTL (default 60)
- LOG_LEVEL: Optional, logging level name (default INFO)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "https://web-production-9df5.up.railway.app"
DEFAULT_API_BASE_URL = "http://localhost:8000"


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    The project root is found by going up from this file's location
    (api/config.py -> project root). Safe to call multiple times; existing
    environment variables take precedence over .env values.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, value, default)
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, value, default)
        return default


class BackendConfig:
    """Configuration for the remote recipe backend."""

    @staticmethod
    def get_url() -> str:
        """
        Get the recipe backend base URL.

        Returns:
            NEXT_PUBLIC_BACKEND_URL, else RECIPE_BACKEND_URL, else the default
            hosted backend
        """
        return (
            os.getenv("NEXT_PUBLIC_BACKEND_URL")
            or os.getenv("RECIPE_BACKEND_URL")
            or DEFAULT_BACKEND_URL
        )


class GoogleCloudConfig:
    """Configuration for the Google Vision and Vertex AI connectors."""

    @staticmethod
    def get_project_id() -> Optional[str]:
        """
        Get the Google Cloud project id.

        Returns:
            Project id string or None if not set
        """
        return os.getenv("GOOGLE_CLOUD_PROJECT_ID")

    @staticmethod
    def get_credentials_json() -> Optional[str]:
        """Raw GOOGLE_APPLICATION_CREDENTIALS_JSON value, or None if not set."""
        return os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON")

    @staticmethod
    def get_credentials_info() -> Optional[Dict[str, Any]]:
        """
        Parse the service-account key from GOOGLE_APPLICATION_CREDENTIALS_JSON.

        Surrounding single or double quotes (common in .env files) are stripped.
        If the value does not parse, it is retried with raw line breaks escaped,
        which fixes keys pasted with a multi-line private_key.

        Returns:
            Parsed key dictionary, or None if the variable is not set

        Raises:
            ValueError: If the value is set but is not valid JSON
        """
        creds_str = GoogleCloudConfig.get_credentials_json()
        if not creds_str:
            return None

        creds_str = creds_str.strip()
        if len(creds_str) >= 2 and creds_str[0] == creds_str[-1] and creds_str[0] in ("'", '"'):
            creds_str = creds_str[1:-1]

        try:
            return json.loads(creds_str)
        except json.JSONDecodeError:
            pass

        try:
            return json.loads(creds_str.replace("\n", "\\n"))
        except json.JSONDecodeError as je:
            logger.error("JSON parse error at line %s, column %s", je.lineno, je.colno)
            raise ValueError(f"GOOGLE_APPLICATION_CREDENTIALS_JSON is not valid JSON: {je.msg}") from je


class RateLimitConfig:
    """Configuration for the /api/rawSearch token bucket."""

    @staticmethod
    def get_max_tokens() -> int:
        return _get_int("RATE_LIMIT_MAX_TOKENS", 10)

    @staticmethod
    def get_refill_seconds() -> float:
        return _get_float("RATE_LIMIT_REFILL_SECONDS", 6.0)


class CacheConfig:
    """Configuration for the proxy search cache."""

    @staticmethod
    def get_ttl_seconds() -> int:
        return _get_int("SEARCH_CACHE_TTL_SECONDS", 60)


class FrontendConfig:
    """Configuration for the Streamlit UI."""

    @staticmethod
    def get_api_base_url() -> str:
        """
        Get the proxy URL the UI calls.

        Returns:
            API_BASE_URL without a trailing slash (default: http://localhost:8000)
        """
        return os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def validate_required_config() -> None:
    """
    Validate that all required environment variables are set.

    Raises:
        RuntimeError: If any required configuration is missing

    Note:
        Only photo detection and image search need these variables; recipe
        search works without them. The routes check their own configuration
        and answer 500 naming the missing variable.
    """
    missing = []

    if not GoogleCloudConfig.get_project_id():
        missing.append("GOOGLE_CLOUD_PROJECT_ID (required for ingredient detection and image search)")

    if not GoogleCloudConfig.get_credentials_json():
        missing.append("GOOGLE_APPLICATION_CREDENTIALS_JSON (required for ingredient detection and image search)")

    if missing:
        raise RuntimeError(
            "Missing required environment variables:\n"
            + "\n".join(f"  - {var}" for var in missing)
            + "\n\nPlease create a .env file at the project root with these variables."
        )
