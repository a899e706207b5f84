"""
Recipe backend connector.

The remote recipe-search backend is an opaque HTTP service: POST a JSON search
payload to {backend_url}/search and get back {"recipes": [...],
"pagination": {...}}. This connector forwards payloads without reshaping them;
normalisation happens in the proxy route before the call.
"""

import logging
from typing import Any, Dict, Optional

import requests

from recipefinder.errors import ErrorCode, NonJSONResponseError

from .base import DEFAULT_TIMEOUT_SECONDS, BaseConnector

logger = logging.getLogger(__name__)


class RecipeBackendConnector(BaseConnector):
    """
    Connector for the remote recipe-search backend.

    Args:
        backend_url: Base URL of the backend (without the /search path)
        timeout: Request timeout in seconds
        session: Optional requests.Session (a new one is created otherwise)
    """
    service = "recipe-backend"

    def __init__(
        self,
        backend_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not backend_url:
            raise RuntimeError(
                "Recipe backend URL is not set. Please add it to your .env file at the project root:\n"
                "NEXT_PUBLIC_BACKEND_URL=https://your-backend.example.com"
            )
        self.backend_url = backend_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def search_url(self) -> str:
        return f"{self.backend_url}/search"

    def search_recipes(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Forward a search payload to the backend.

        Args:
            payload: JSON-serialisable search body

        Returns:
            The backend's JSON response

        Raises:
            RecipeAPIError: With the backend's status, body and Retry-After for
                HTTP errors, NETWORK_ERROR for transport failures
        """
        logger.info("Forwarding search to %s", self.search_url)

        try:
            response = self.session.post(self.search_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Recipe backend request failed: %s", e)
            raise self._network_error(e) from e

        if not response.ok:
            logger.warning("Recipe backend returned HTTP %s", response.status_code)
            raise self._error_from_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise NonJSONResponseError(
                ErrorCode.API_ERROR, "Recipe backend did not return JSON", details=response.text
            ) from e

    def healthcheck(self) -> Dict[str, Any]:
        return {"service": self.service, "configured": True, "url": self.backend_url}
