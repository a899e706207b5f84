"""
Base connector abstract class for the external HTTP collaborators.

Every service the proxy talks to (the recipe backend, Google Vision, Vertex AI)
sits behind a connector. Connectors:
- Carry a service attribute naming the collaborator (used in logs)
- Turn HTTP and transport failures into RecipeAPIError
- Return plain dictionaries/lists, never response objects
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from recipefinder.errors import ErrorCode, RecipeAPIError

DEFAULT_TIMEOUT_SECONDS = 30


class BaseConnector(ABC):
    """
    Abstract base class for all connectors.

    Attributes:
        service: String identifier for the collaborator (e.g. "recipe-backend")
    """
    service: str

    @abstractmethod
    def healthcheck(self) -> Dict[str, Any]:
        """
        Report whether the connector is configured.

        Returns:
            Dictionary with at least "service" and "configured" keys
        """
        pass

    def _error_from_response(self, response: requests.Response, message: Optional[str] = None) -> RecipeAPIError:
        """Build a RecipeAPIError from a non-2xx response, keeping its body and Retry-After."""
        try:
            details: Any = response.json()
        except ValueError:
            details = response.text

        return RecipeAPIError.from_status(
            response.status_code,
            message or f"{self.service} returned HTTP {response.status_code}",
            details=details,
            retry_after=response.headers.get("Retry-After"),
        )

    def _network_error(self, exc: Exception) -> RecipeAPIError:
        return RecipeAPIError(
            ErrorCode.NETWORK_ERROR,
            f"Could not reach {self.service}: {exc}",
            details=str(exc),
        )
