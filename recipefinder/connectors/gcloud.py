"""
Shared Google Cloud plumbing for the Vision and Vertex AI connectors.

Both APIs are called over plain REST with an OAuth2 access token minted from a
service-account key. google-auth's AuthorizedSession is a requests.Session
that attaches and refreshes the token, so connectors post JSON as usual.
"""

import logging
from typing import Any, Dict, Optional

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from recipefinder.errors import ErrorCode, NonJSONResponseError

from .base import DEFAULT_TIMEOUT_SECONDS, BaseConnector

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def build_authorized_session(credentials_info: Dict[str, Any]) -> AuthorizedSession:
    """
    Create an authorized HTTP session from service-account key data.

    Raises:
        ValueError: If the key data is not a valid service-account key
    """
    credentials = service_account.Credentials.from_service_account_info(
        credentials_info, scopes=[CLOUD_PLATFORM_SCOPE]
    )
    return AuthorizedSession(credentials)


class GoogleCloudConnector(BaseConnector):
    """
    Base for connectors calling Google Cloud REST APIs.

    Args:
        credentials_info: Parsed service-account JSON
        project_id: Google Cloud project id
        session: Optional pre-built session (tests pass a Mock)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        credentials_info: Optional[Dict[str, Any]],
        project_id: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if not credentials_info:
            raise RuntimeError("GOOGLE_APPLICATION_CREDENTIALS_JSON is not configured")
        if not project_id:
            raise RuntimeError("GOOGLE_CLOUD_PROJECT_ID is not configured")

        self.project_id = project_id
        self.timeout = timeout
        self.session = session or build_authorized_session(credentials_info)

    def _post_json(self, url: str, body: Dict[str, Any], api_name: str) -> Dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON reply.

        Raises:
            RecipeAPIError: On transport errors and HTTP errors
            NonJSONResponseError: When the reply is not JSON
        """
        try:
            response = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("%s request failed: %s", api_name, e)
            raise self._network_error(e) from e

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error("%s did not return JSON (HTTP %s)", api_name, response.status_code)
            raise NonJSONResponseError(
                ErrorCode.API_ERROR,
                f"{api_name} did not return JSON",
                details=response.text,
                status_code=response.status_code,
            )

        if not response.ok:
            raise self._error_from_response(response, f"{api_name} returned HTTP {response.status_code}")

        return response.json()

    def healthcheck(self) -> Dict[str, Any]:
        return {"service": self.service, "configured": True, "project_id": self.project_id}
