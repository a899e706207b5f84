"""
Tests for environment-based configuration.
"""

import os
from unittest.mock import patch

import pytest

from api.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_BACKEND_URL,
    BackendConfig,
    CacheConfig,
    FrontendConfig,
    GoogleCloudConfig,
    RateLimitConfig,
    get_log_level,
    validate_required_config,
)


class TestBackendConfig:
    """Test the recipe backend URL lookup."""

    @patch.dict(os.environ, {}, clear=True)
    def test_default_url(self):
        assert BackendConfig.get_url() == DEFAULT_BACKEND_URL

    @patch.dict(os.environ, {"NEXT_PUBLIC_BACKEND_URL": "https://a.example.com", "RECIPE_BACKEND_URL": "https://b.example.com"}, clear=True)
    def test_public_url_wins(self):
        assert BackendConfig.get_url() == "https://a.example.com"

    @patch.dict(os.environ, {"RECIPE_BACKEND_URL": "https://b.example.com"}, clear=True)
    def test_alias(self):
        assert BackendConfig.get_url() == "https://b.example.com"


class TestGoogleCloudCredentials:
    """Test parsing of GOOGLE_APPLICATION_CREDENTIALS_JSON."""

    @patch.dict(os.environ, {}, clear=True)
    def test_not_set(self):
        assert GoogleCloudConfig.get_credentials_info() is None

    @patch.dict(os.environ, {"GOOGLE_APPLICATION_CREDENTIALS_JSON": '{"type": "service_account"}'}, clear=True)
    def test_plain_json(self):
        assert GoogleCloudConfig.get_credentials_info() == {"type": "service_account"}

    @patch.dict(os.environ, {"GOOGLE_APPLICATION_CREDENTIALS_JSON": '\'{"type": "service_account"}\''}, clear=True)
    def test_surrounding_quotes_are_stripped(self):
        assert GoogleCloudConfig.get_credentials_info() == {"type": "service_account"}

    @patch.dict(
        os.environ,
        {"GOOGLE_APPLICATION_CREDENTIALS_JSON": '{"private_key": "-----BEGIN KEY-----\nabc\n-----END KEY-----"}'},
        clear=True,
    )
    def test_raw_line_breaks_in_private_key(self):
        """Test that a key pasted with real line breaks still parses."""
        info = GoogleCloudConfig.get_credentials_info()
        assert info["private_key"] == "-----BEGIN KEY-----\nabc\n-----END KEY-----"

    @patch.dict(os.environ, {"GOOGLE_APPLICATION_CREDENTIALS_JSON": "not json"}, clear=True)
    def test_invalid_json(self):
        with pytest.raises(ValueError, match="not valid JSON"):
            GoogleCloudConfig.get_credentials_info()

    @patch.dict(os.environ, {"GOOGLE_CLOUD_PROJECT_ID": "my-project"}, clear=True)
    def test_project_id(self):
        assert GoogleCloudConfig.get_project_id() == "my-project"


class TestNumericSettings:
    """Test rate limit and cache settings."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        assert RateLimitConfig.get_max_tokens() == 10
        assert RateLimitConfig.get_refill_seconds() == 6.0
        assert CacheConfig.get_ttl_seconds() == 60

    @patch.dict(os.environ, {"RATE_LIMIT_MAX_TOKENS": "20", "RATE_LIMIT_REFILL_SECONDS": "1.5"}, clear=True)
    def test_overrides(self):
        assert RateLimitConfig.get_max_tokens() == 20
        assert RateLimitConfig.get_refill_seconds() == 1.5

    @patch.dict(os.environ, {"SEARCH_CACHE_TTL_SECONDS": "soon"}, clear=True)
    def test_invalid_value_falls_back(self):
        assert CacheConfig.get_ttl_seconds() == 60


class TestFrontendConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_default_api_base_url(self):
        assert FrontendConfig.get_api_base_url() == DEFAULT_API_BASE_URL

    @patch.dict(os.environ, {"API_BASE_URL": "https://proxy.example.com/"}, clear=True)
    def test_trailing_slash_removed(self):
        assert FrontendConfig.get_api_base_url() == "https://proxy.example.com"

    @patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True)
    def test_log_level(self):
        assert get_log_level() == "DEBUG"


class TestValidateRequiredConfig:
    """Test the startup configuration check."""

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_variables_are_listed(self):
        with pytest.raises(RuntimeError) as exc_info:
            validate_required_config()

        message = str(exc_info.value)
        assert "GOOGLE_CLOUD_PROJECT_ID" in message
        assert "GOOGLE_APPLICATION_CREDENTIALS_JSON" in message

    @patch.dict(
        os.environ,
        {"GOOGLE_CLOUD_PROJECT_ID": "my-project", "GOOGLE_APPLICATION_CREDENTIALS_JSON": "{}"},
        clear=True,
    )
    def test_complete_config(self):
        validate_required_config()
