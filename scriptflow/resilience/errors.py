"""
Error taxonomy and classification for user-facing failure responses.
"""

import logging
import traceback
from dataclasses import dataclass
from typing import Optional

from ..models.generation import ErrorCategory, FailureInfo

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

# Lines of traceback kept in diagnostic logs
TRACEBACK_LOG_LINES = 3


class CollaboratorError(Exception):
    """Raised by collaborator adapters with a normalized FailureInfo attached."""

    def __init__(self, failure: FailureInfo):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def status_code(self) -> Optional[int]:
        return self.failure.status_code


class RequestValidationError(Exception):
    """Missing or malformed client input. Never retried, always a 400."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion


class PromptBuildError(Exception):
    """Prompt construction failed for otherwise valid input."""


class UnexpectedReplyError(Exception):
    """A single-shot reply did not contain the expected text content."""


@dataclass(frozen=True)
class ClassifiedError:
    """Category plus the copy shown to the user."""
    category: ErrorCategory
    user_message: str
    suggestion: str


def classify(failure: FailureInfo) -> ClassifiedError:
    """
    Map a failure to a category. First matching rule wins.

    Message rules compare against the lower-cased message.
    """
    status = failure.status_code
    message = (failure.message or "").lower()

    if status == 429:
        return ClassifiedError(
            ErrorCategory.RATE_LIMITED,
            "Rate limit exceeded. Please wait a moment and try again.",
            "Please wait a moment before trying again. The service is experiencing high demand.",
        )

    if status is not None and status >= 500:
        return ClassifiedError(
            ErrorCategory.SERVER_ERROR,
            "Server error occurred. The request was already retried automatically.",
            "This is a temporary server issue. Please try again in a moment.",
        )

    if "timeout" in message:
        return ClassifiedError(
            ErrorCategory.TIMEOUT,
            "Request timed out. Please try again.",
            "The upstream service was slow to respond. Try again, or shorten your request.",
        )

    if "network" in message or "fetch failed" in message:
        return ClassifiedError(
            ErrorCategory.NETWORK_ERROR,
            "Network error. Please check your connection and try again.",
            "Please check your internet connection and try again.",
        )

    if "token" in message or "context length" in message:
        return ClassifiedError(
            ErrorCategory.CONTENT_TOO_LARGE,
            "Content too long. Try shortening your input or removing some research sources.",
            "Shorten your input or reduce the number of research sources.",
        )

    if status == 401 or "api key" in message:
        return ClassifiedError(
            ErrorCategory.AUTH_ERROR,
            "Authentication error. Please check your API keys in environment variables.",
            "Check that GEMINI_API_KEY and EXA_API_KEY are set and valid.",
        )

    return ClassifiedError(
        ErrorCategory.UNKNOWN,
        failure.message or GENERIC_ERROR_MESSAGE,
        "Please try again. If the problem persists, try simplifying your request.",
    )


def status_for(category: ErrorCategory, upstream_status: Optional[int] = None) -> int:
    """HTTP status code reported to the client for a category."""
    if category == ErrorCategory.VALIDATION_ERROR:
        return 400
    if category == ErrorCategory.RATE_LIMITED:
        return 429
    if category == ErrorCategory.AUTH_ERROR:
        return 401
    if category == ErrorCategory.SERVER_ERROR and upstream_status and upstream_status >= 500:
        return upstream_status
    return 500


def error_body(error: str, details: str, suggestion: Optional[str] = None) -> dict:
    """JSON body for every failure response."""
    body = {"error": error, "details": details}
    if suggestion:
        body["suggestion"] = suggestion
    return body


def truncated_traceback(exc: BaseException, lines: int = TRACEBACK_LOG_LINES) -> str:
    """First few lines of a formatted traceback, for logs only."""
    formatted = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return "\n".join(formatted.splitlines()[:lines]) or "No stack trace available"
