"""
Tests for the Streamlit proxy API client.

requests.post is mocked; every failure must surface as RecipeAPIError with
a code the search controller can act on.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from recipefinder.errors import ErrorCode, RecipeAPIError
from streamlit_app.utils import api_client


def make_response(status_code=200, json_data=None, text="", headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    response.headers = headers or {}
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture(autouse=True)
def proxy_url():
    with patch("streamlit_app.utils.api_client.get_api_base_url", return_value="http://proxy.test"):
        yield


class TestFetchRecipes:
    """Test search requests to /api/rawSearch."""

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_posts_payload(self, mock_post):
        mock_post.return_value = make_response(json_data={"recipes": [], "pagination": None})

        result = api_client.fetch_recipes({"ingredients": ["chicken"]})

        mock_post.assert_called_once_with(
            "http://proxy.test/api/rawSearch",
            timeout=api_client.SEARCH_TIMEOUT_SECONDS,
            json={"ingredients": ["chicken"]},
        )
        assert result == {"recipes": [], "pagination": None}

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_rate_limited(self, mock_post):
        """Test that a 429 keeps the proxy's message and Retry-After."""
        mock_post.return_value = make_response(
            429,
            json_data={"error": "Too many requests", "message": "Too many requests, please try again in 6 seconds."},
            headers={"Retry-After": "6"},
        )

        with pytest.raises(RecipeAPIError) as exc_info:
            api_client.fetch_recipes({"ingredients": ["chicken"]})

        error = exc_info.value
        assert error.is_rate_limited
        assert error.retry_after == "6"
        assert error.message == "Too many requests, please try again in 6 seconds."

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_validation_error(self, mock_post):
        mock_post.return_value = make_response(422, json_data={"error": "Invalid search request"})

        with pytest.raises(RecipeAPIError) as exc_info:
            api_client.fetch_recipes({"ingredients": "chicken"})

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Invalid search request"

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_server_error_without_json(self, mock_post):
        mock_post.return_value = make_response(502, text="Bad gateway")

        with pytest.raises(RecipeAPIError) as exc_info:
            api_client.fetch_recipes({})

        assert exc_info.value.code is ErrorCode.API_ERROR
        assert exc_info.value.message == "Request failed with status code 502"
        assert exc_info.value.details == "Bad gateway"

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_timeout(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(RecipeAPIError) as exc_info:
            api_client.fetch_recipes({})

        assert exc_info.value.code is ErrorCode.NETWORK_ERROR
        assert exc_info.value.status_code is None

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_connection_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(RecipeAPIError) as exc_info:
            api_client.fetch_recipes({})

        assert exc_info.value.code is ErrorCode.NETWORK_ERROR
        assert exc_info.value.details == "refused"


class TestImageRequests:
    """Test ingredient detection and image search requests."""

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_detect_ingredients_uploads_image(self, mock_post):
        mock_post.return_value = make_response(json_data={"ingredients": ["Tomato"]})
        uploaded = Mock()
        uploaded.name = "food.png"
        uploaded.type = "image/png"
        uploaded.getvalue.return_value = b"png-bytes"

        result = api_client.detect_ingredients(uploaded)

        assert result == {"ingredients": ["Tomato"]}
        url = mock_post.call_args[0][0]
        files = mock_post.call_args[1]["files"]
        assert url == "http://proxy.test/api/detectIngredients"
        assert files == {"image": ("food.png", b"png-bytes", "image/png")}

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_search_images(self, mock_post):
        images = [{"url": "https://images.example.com/1.png", "alt": "soup - result 1"}]
        mock_post.return_value = make_response(json_data={"images": images})

        assert api_client.search_images("soup") == images
        assert mock_post.call_args[1]["json"] == {"query": "soup"}

    @patch("streamlit_app.utils.api_client.requests.post")
    def test_search_images_error(self, mock_post):
        mock_post.return_value = make_response(400, json_data={"error": "Query is required"})

        with pytest.raises(RecipeAPIError, match="Query is required"):
            api_client.search_images("")
