"""
Tests for the HTTP connectors using mocked sessions.

These tests mock the HTTP session to avoid making real API calls during testing.
The tests verify that:
- Connectors refuse to start without their configuration
- Payloads are posted to the right endpoints
- Responses are turned into plain dictionaries/lists
- HTTP and transport errors become RecipeAPIError with the right code
"""

import base64
from unittest.mock import Mock, patch

import pytest
import requests

from recipefinder.connectors.gcloud import CLOUD_PLATFORM_SCOPE, build_authorized_session
from recipefinder.connectors.recipe_backend import RecipeBackendConnector
from recipefinder.connectors.vertex_connector import VertexImageConnector, prediction_to_url
from recipefinder.connectors.vision_connector import VISION_ANNOTATE_URL, VisionConnector
from recipefinder.errors import ErrorCode, NonJSONResponseError, RecipeAPIError

CREDENTIALS = {"type": "service_account", "client_email": "test@example.iam.gserviceaccount.com"}


def make_response(status_code=200, json_data=None, text="", headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    response.headers = headers if headers is not None else {"content-type": "application/json"}
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


class TestRecipeBackendConnector:
    """Tests for the recipe backend connector."""

    def test_requires_backend_url(self):
        """Test that an empty backend URL is a configuration error."""
        with pytest.raises(RuntimeError, match="NEXT_PUBLIC_BACKEND_URL"):
            RecipeBackendConnector("")

    def test_search_posts_payload(self):
        """Test that the payload is forwarded to {backend}/search unchanged."""
        session = Mock()
        session.post.return_value = make_response(json_data={"recipes": [], "pagination": {"page": 1}})
        connector = RecipeBackendConnector("https://backend.example.com/", timeout=5, session=session)

        result = connector.search_recipes({"ingredients": ["chicken"]})

        session.post.assert_called_once_with(
            "https://backend.example.com/search", json={"ingredients": ["chicken"]}, timeout=5
        )
        assert result == {"recipes": [], "pagination": {"page": 1}}

    def test_backend_rate_limit(self):
        """Test that a 429 keeps the status, body and Retry-After."""
        session = Mock()
        session.post.return_value = make_response(
            429, json_data={"error": "Too many requests"}, headers={"Retry-After": "30"}
        )
        connector = RecipeBackendConnector("https://backend.example.com", session=session)

        with pytest.raises(RecipeAPIError) as exc_info:
            connector.search_recipes({"ingredients": ["chicken"]})

        error = exc_info.value
        assert error.code is ErrorCode.RATE_LIMITED
        assert error.status_code == 429
        assert error.retry_after == "30"
        assert error.details == {"error": "Too many requests"}

    def test_backend_error_with_text_body(self):
        session = Mock()
        session.post.return_value = make_response(502, text="Bad gateway", headers={})
        connector = RecipeBackendConnector("https://backend.example.com", session=session)

        with pytest.raises(RecipeAPIError) as exc_info:
            connector.search_recipes({})

        assert exc_info.value.code is ErrorCode.API_ERROR
        assert exc_info.value.details == "Bad gateway"

    def test_network_error(self):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("connection refused")
        connector = RecipeBackendConnector("https://backend.example.com", session=session)

        with pytest.raises(RecipeAPIError) as exc_info:
            connector.search_recipes({})

        assert exc_info.value.code is ErrorCode.NETWORK_ERROR
        assert exc_info.value.status_code is None

    def test_non_json_success(self):
        """Test that a 200 with a non-JSON body is an error without a status."""
        session = Mock()
        session.post.return_value = make_response(200, text="<html>", headers={})
        connector = RecipeBackendConnector("https://backend.example.com", session=session)

        with pytest.raises(NonJSONResponseError) as exc_info:
            connector.search_recipes({})

        assert exc_info.value.message == "Recipe backend did not return JSON"
        assert exc_info.value.status_code is None

    def test_healthcheck(self):
        connector = RecipeBackendConnector("https://backend.example.com", session=Mock())
        assert connector.healthcheck() == {
            "service": "recipe-backend",
            "configured": True,
            "url": "https://backend.example.com",
        }


class TestGoogleCloudSession:
    """Tests for building the authorized Google session."""

    @patch("recipefinder.connectors.gcloud.AuthorizedSession")
    @patch("recipefinder.connectors.gcloud.service_account.Credentials.from_service_account_info")
    def test_build_authorized_session(self, mock_from_info, mock_session):
        session = build_authorized_session(CREDENTIALS)

        mock_from_info.assert_called_once_with(CREDENTIALS, scopes=[CLOUD_PLATFORM_SCOPE])
        mock_session.assert_called_once_with(mock_from_info.return_value)
        assert session is mock_session.return_value

    @patch("recipefinder.connectors.gcloud.build_authorized_session")
    def test_connector_builds_session_when_none_given(self, mock_build):
        connector = VisionConnector(CREDENTIALS, "my-project")

        mock_build.assert_called_once_with(CREDENTIALS)
        assert connector.session is mock_build.return_value

    def test_missing_credentials(self):
        with pytest.raises(RuntimeError, match="GOOGLE_APPLICATION_CREDENTIALS_JSON"):
            VisionConnector(None, "my-project", session=Mock())

    def test_missing_project(self):
        with pytest.raises(RuntimeError, match="GOOGLE_CLOUD_PROJECT_ID"):
            VertexImageConnector(CREDENTIALS, "", session=Mock())


class TestVisionConnector:
    """Tests for label detection."""

    def test_detect_labels(self):
        """Test that the image is sent base64-encoded and labels are returned."""
        labels = [{"description": "Tomato", "score": 0.95}]
        session = Mock()
        session.post.return_value = make_response(json_data={"responses": [{"labelAnnotations": labels}]})
        connector = VisionConnector(CREDENTIALS, "my-project", session=session)

        result = connector.detect_labels(b"fake-image")

        assert result == labels
        url = session.post.call_args[0][0]
        body = session.post.call_args[1]["json"]
        assert url == VISION_ANNOTATE_URL
        assert body["requests"][0]["image"]["content"] == base64.b64encode(b"fake-image").decode("ascii")
        assert body["requests"][0]["features"][0]["type"] == "LABEL_DETECTION"

    def test_no_labels(self):
        session = Mock()
        session.post.return_value = make_response(json_data={"responses": [{}]})
        connector = VisionConnector(CREDENTIALS, "my-project", session=session)

        assert connector.detect_labels(b"fake-image") == []

    def test_non_json_reply(self):
        """Test that an HTML error page is reported as a non-JSON reply."""
        session = Mock()
        session.post.return_value = make_response(
            403, text="<html>Forbidden</html>", headers={"content-type": "text/html"}
        )
        connector = VisionConnector(CREDENTIALS, "my-project", session=session)

        with pytest.raises(NonJSONResponseError) as exc_info:
            connector.detect_labels(b"fake-image")

        assert exc_info.value.message == "Vision API did not return JSON"
        assert exc_info.value.details == "<html>Forbidden</html>"
        assert exc_info.value.status_code == 403

    def test_http_error(self):
        session = Mock()
        session.post.return_value = make_response(500, json_data={"error": {"message": "internal"}})
        connector = VisionConnector(CREDENTIALS, "my-project", session=session)

        with pytest.raises(RecipeAPIError) as exc_info:
            connector.detect_labels(b"fake-image")

        assert exc_info.value.code is ErrorCode.API_ERROR
        assert exc_info.value.details == {"error": {"message": "internal"}}


class TestVertexImageConnector:
    """Tests for image generation."""

    def test_predict_url(self):
        connector = VertexImageConnector(CREDENTIALS, "my-project", session=Mock())
        assert connector.predict_url == (
            "https://us-central1-aiplatform.googleapis.com/v1/projects/my-project"
            "/locations/us-central1/publishers/google/models/imagegeneration@002:predict"
        )

    def test_generate_images(self):
        session = Mock()
        session.post.return_value = make_response(
            json_data={
                "predictions": [
                    {"image": "https://images.example.com/1.png"},
                    {"bytesBase64Encoded": "aGk=", "mimeType": "image/jpeg"},
                ]
            }
        )
        connector = VertexImageConnector(CREDENTIALS, "my-project", session=session)

        result = connector.generate_images("tomato soup")

        assert result == [
            {"url": "https://images.example.com/1.png", "alt": "tomato soup - result 1"},
            {"url": "data:image/jpeg;base64,aGk=", "alt": "tomato soup - result 2"},
        ]
        assert "tomato soup" in session.post.call_args[1]["json"]["instances"][0]["prompt"]

    def test_no_predictions(self):
        session = Mock()
        session.post.return_value = make_response(json_data={})
        connector = VertexImageConnector(CREDENTIALS, "my-project", session=session)

        assert connector.generate_images("tomato soup") == []

    def test_prediction_without_image(self):
        assert prediction_to_url({}) is None
        assert prediction_to_url({"bytesBase64Encoded": "aGk="}) == "data:image/png;base64,aGk="
