"""Retry and error classification shared by every orchestrated flow."""

from .errors import (
    ClassifiedError,
    CollaboratorError,
    PromptBuildError,
    RequestValidationError,
    UnexpectedReplyError,
    classify,
    error_body,
    status_for,
)
from .retry import is_retryable_error, retry_if_retryable, retry_with_backoff

__all__ = [
    "ClassifiedError",
    "CollaboratorError",
    "PromptBuildError",
    "RequestValidationError",
    "UnexpectedReplyError",
    "classify",
    "error_body",
    "status_for",
    "is_retryable_error",
    "retry_if_retryable",
    "retry_with_backoff",
]
