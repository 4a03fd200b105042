"""
Unit tests for startup validation.
"""

import pytest
import os
from unittest.mock import patch, MagicMock


class TestGeminiValidation:
    """Tests for Gemini API validation."""

    def test_missing_api_key(self):
        """Test validation fails without API key."""
        from scriptflow.config.startup_validation import validate_gemini_api, ServiceStatus

        with patch.dict(os.environ, {}, clear=True):
            result = validate_gemini_api()
            assert result.status == ServiceStatus.UNAVAILABLE
            assert "GEMINI_API_KEY" in result.message

    def test_short_api_key(self):
        """Test validation fails with short API key."""
        from scriptflow.config.startup_validation import validate_gemini_api, ServiceStatus

        with patch.dict(os.environ, {"GEMINI_API_KEY": "short"}, clear=True):
            result = validate_gemini_api()
            assert result.status == ServiceStatus.UNAVAILABLE
            assert "invalid" in result.message.lower()

    def test_valid_api_key(self):
        """Test validation passes with valid API key."""
        from scriptflow.config.startup_validation import validate_gemini_api, ServiceStatus

        with patch.dict(os.environ, {"GEMINI_API_KEY": "a" * 40}, clear=True):
            with patch("google.genai.Client") as mock_client:
                mock_client.return_value = MagicMock()
                result = validate_gemini_api()
                assert result.status == ServiceStatus.AVAILABLE


class TestCollaboratorValidation:
    """Tests for research and trend source validation."""

    def test_exa_missing(self):
        from scriptflow.config.startup_validation import validate_exa_api, ServiceStatus

        with patch.dict(os.environ, {}, clear=True):
            result = validate_exa_api()
            assert result.status == ServiceStatus.UNAVAILABLE
            assert result.required is False

    def test_reddit_falls_back_to_public_api(self):
        from scriptflow.config.startup_validation import validate_reddit, ServiceStatus

        with patch.dict(os.environ, {"REDDIT_CLIENT_ID": "id"}, clear=True):
            result = validate_reddit()
            assert result.status == ServiceStatus.DEGRADED
            assert result.details["missing"] == ["REDDIT_CLIENT_SECRET"]
            assert result.details["fallback"] == "public"

    def test_reddit_configured(self):
        from scriptflow.config.startup_validation import validate_reddit, ServiceStatus

        env = {"REDDIT_CLIENT_ID": "id", "REDDIT_CLIENT_SECRET": "secret"}
        with patch.dict(os.environ, env, clear=True):
            assert validate_reddit().status == ServiceStatus.AVAILABLE

    def test_youtube_missing(self):
        from scriptflow.config.startup_validation import validate_youtube, ServiceStatus

        with patch.dict(os.environ, {}, clear=True):
            assert validate_youtube().status == ServiceStatus.DEGRADED


class TestStartupValidation:
    """Tests for the combined validation run."""

    def test_required_failure_invalidates(self):
        from scriptflow.config.startup_validation import run_startup_validation

        with patch.dict(os.environ, {}, clear=True):
            validation = run_startup_validation(log_summary=False)

        assert not validation.is_valid
        assert any("Gemini API" in e for e in validation.errors)
        assert any("Exa Research" in w for w in validation.warnings)

    def test_optional_services_only_warn(self):
        from scriptflow.config.startup_validation import run_startup_validation

        with patch.dict(os.environ, {"GEMINI_API_KEY": "a" * 40}, clear=True):
            with patch("google.genai.Client"):
                validation = run_startup_validation(log_summary=False)

        assert validation.is_valid
        assert validation.errors == []
        assert validation.to_dict()["services"]["Gemini API"] == "available"

    def test_cache(self):
        from scriptflow.config import startup_validation

        startup_validation.reset_validation_cache()
        with patch.object(startup_validation, "run_startup_validation") as run:
            run.return_value = startup_validation.StartupValidation()
            first = startup_validation.ensure_validated()
            second = startup_validation.ensure_validated()
            cached = startup_validation.get_cached_validation()

        assert first is second
        assert cached is first
        assert run.call_count == 1
        startup_validation.reset_validation_cache()
        assert startup_validation.get_cached_validation() is None
