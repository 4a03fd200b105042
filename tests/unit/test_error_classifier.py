"""
Unit tests for failure classification and error responses.
"""

import pytest

from scriptflow.models.generation import ErrorCategory, FailureInfo
from scriptflow.resilience.errors import (
    GENERIC_ERROR_MESSAGE,
    CollaboratorError,
    classify,
    error_body,
    status_for,
    truncated_traceback,
)


CLASSIFICATION_CASES = [
    # (status_code, message, expected category)
    (429, "too many requests", ErrorCategory.RATE_LIMITED),
    (429, "timeout", ErrorCategory.RATE_LIMITED),
    (500, "internal", ErrorCategory.SERVER_ERROR),
    (503, "network unreachable", ErrorCategory.SERVER_ERROR),
    (None, "Request Timeout after 30 seconds", ErrorCategory.TIMEOUT),
    (None, "read timed out", ErrorCategory.UNKNOWN),
    (None, "Connection timed out while counting tokens", ErrorCategory.CONTENT_TOO_LARGE),
    (None, "Network error contacting Gemini", ErrorCategory.NETWORK_ERROR),
    (None, "fetch failed", ErrorCategory.NETWORK_ERROR),
    (400, "input token count exceeds the maximum", ErrorCategory.CONTENT_TOO_LARGE),
    (None, "context length exceeded", ErrorCategory.CONTENT_TOO_LARGE),
    (401, "unauthorized", ErrorCategory.AUTH_ERROR),
    (403, "Invalid API key provided", ErrorCategory.AUTH_ERROR),
    (404, "model not found", ErrorCategory.UNKNOWN),
    (None, "", ErrorCategory.UNKNOWN),
]


class TestClassify:
    """Table-driven tests for classify."""

    @pytest.mark.parametrize("status_code,message,expected", CLASSIFICATION_CASES)
    def test_category(self, status_code, message, expected):
        failure = FailureInfo(message=message, status_code=status_code)
        assert classify(failure).category == expected

    def test_rule_order_rate_limit_beats_timeout(self):
        result = classify(FailureInfo(message="timeout", status_code=429))
        assert result.category == ErrorCategory.RATE_LIMITED
        assert "Rate limit exceeded" in result.user_message

    def test_timeout_beats_auth(self):
        result = classify(FailureInfo(message="timeout while checking api key", status_code=401))
        assert result.category == ErrorCategory.TIMEOUT

    def test_classification_is_deterministic(self):
        failure = FailureInfo(message="fetch failed", status_code=None)
        assert classify(failure) == classify(failure)

    def test_unknown_uses_raw_message(self):
        result = classify(FailureInfo(message="model not found"))
        assert result.user_message == "model not found"

    def test_unknown_without_message_uses_fallback(self):
        result = classify(FailureInfo(message=""))
        assert result.user_message == GENERIC_ERROR_MESSAGE

    def test_every_category_has_suggestion(self):
        for status_code, message, _ in CLASSIFICATION_CASES:
            assert classify(FailureInfo(message=message, status_code=status_code)).suggestion

    def test_content_too_large_suggests_fewer_sources(self):
        result = classify(FailureInfo(message="too many tokens"))
        assert "sources" in result.suggestion


class TestStatusMapping:
    """Tests for HTTP status selection."""

    @pytest.mark.parametrize("category,upstream,expected", [
        (ErrorCategory.VALIDATION_ERROR, None, 400),
        (ErrorCategory.RATE_LIMITED, 429, 429),
        (ErrorCategory.AUTH_ERROR, None, 401),
        (ErrorCategory.AUTH_ERROR, 403, 401),
        (ErrorCategory.SERVER_ERROR, 503, 503),
        (ErrorCategory.TIMEOUT, None, 500),
        (ErrorCategory.NETWORK_ERROR, None, 500),
        (ErrorCategory.CONTENT_TOO_LARGE, 400, 500),
        (ErrorCategory.UNKNOWN, 404, 500),
    ])
    def test_status_for(self, category, upstream, expected):
        assert status_for(category, upstream) == expected


class TestFailureInfo:
    """Tests for FailureInfo normalization."""

    def test_collaborator_error_keeps_prepared_failure(self):
        failure = FailureInfo(message="quota", status_code=429)
        assert FailureInfo.from_exception(CollaboratorError(failure)) is failure

    def test_reads_status_attribute(self):
        class ApiError(Exception):
            status = 503

        assert FailureInfo.from_exception(ApiError("down")).status_code == 503

    def test_parses_status_from_message(self):
        failure = FailureInfo.from_exception(RuntimeError("Request failed with status code 429"))
        assert failure.status_code == 429

    def test_message_falls_back_to_class_name(self):
        assert FailureInfo.from_exception(TimeoutError()).message == "TimeoutError"


class TestErrorBody:
    """Tests for error response bodies."""

    def test_body_with_suggestion(self):
        assert error_body("Oops", "details", "retry") == {
            "error": "Oops",
            "details": "details",
            "suggestion": "retry",
        }

    def test_body_without_suggestion(self):
        assert "suggestion" not in error_body("Oops", "details")

    def test_traceback_is_truncated(self):
        try:
            raise ValueError("bad")
        except ValueError as e:
            text = truncated_traceback(e, lines=2)
        assert len(text.splitlines()) == 2
