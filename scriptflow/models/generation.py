"""
Generation models shared by the retrier, classifier, relay and orchestrator.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RetryPolicy(BaseModel):
    """Bounded exponential backoff settings, supplied per call."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=1)
    base_delay_ms: int = Field(default=1000, gt=0)
    max_delay_ms: int = Field(default=10000, gt=0)

    @model_validator(mode="after")
    def _check_delay_bounds(self):
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        return self

    def delay_for(self, attempt_index: int) -> int:
        """Delay in milliseconds after the failed attempt ``attempt_index``."""
        return min(self.base_delay_ms * (2 ** attempt_index), self.max_delay_ms)


class ErrorCategory(str, Enum):
    """User-facing failure categories."""
    RATE_LIMITED = "RateLimited"
    SERVER_ERROR = "ServerError"
    TIMEOUT = "Timeout"
    NETWORK_ERROR = "NetworkError"
    CONTENT_TOO_LARGE = "ContentTooLarge"
    AUTH_ERROR = "AuthError"
    VALIDATION_ERROR = "ValidationError"
    UNKNOWN = "Unknown"


_STATUS_IN_MESSAGE = re.compile(r"status code (\d{3})")


@dataclass(frozen=True)
class FailureInfo:
    """Normalized description of a failed collaborator call."""

    message: str
    status_code: Optional[int] = None
    raw_cause: Any = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FailureInfo":
        """
        Build a FailureInfo from an arbitrary exception.

        Adapters attach a prepared FailureInfo to ``CollaboratorError``;
        anything else is inspected for the usual status attributes.
        """
        failure = getattr(exc, "failure", None)
        if isinstance(failure, FailureInfo):
            return failure

        status_code = None
        for attr in ("status_code", "status", "code"):
            value = getattr(exc, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                status_code = value
                break

        message = str(exc) or exc.__class__.__name__
        if status_code is None:
            match = _STATUS_IN_MESSAGE.search(message)
            if match:
                status_code = int(match.group(1))

        return cls(message=message, status_code=status_code, raw_cause=exc)


@dataclass
class Attempt:
    """One iteration of the retry loop."""
    index: int
    error: Optional[FailureInfo] = None


class GenerationRequest(BaseModel):
    """Everything the generation service needs for a single call."""

    model_config = ConfigDict(frozen=True)

    prompt_text: str
    max_output_tokens: int = Field(default=4096, gt=0)
    system_instruction: Optional[str] = None


class StreamEventKind(str, Enum):
    TEXT_DELTA = "text_delta"
    METADATA = "metadata"


@dataclass(frozen=True)
class StreamEvent:
    """One event from an upstream generation stream."""
    kind: StreamEventKind
    text: str = ""
    payload: Any = None

    @classmethod
    def delta(cls, text: str) -> "StreamEvent":
        return cls(kind=StreamEventKind.TEXT_DELTA, text=text)

    @classmethod
    def metadata(cls, payload: Any = None) -> "StreamEvent":
        return cls(kind=StreamEventKind.METADATA, payload=payload)

    @property
    def is_text_delta(self) -> bool:
        return self.kind == StreamEventKind.TEXT_DELTA


@dataclass(frozen=True)
class ReplyPart:
    """A single content part of a complete (non-streamed) reply."""
    kind: str  # "text" or anything else the model returns
    text: Optional[str] = None


@dataclass(frozen=True)
class GenerationReply:
    """Complete reply from a single-shot generation call."""
    parts: tuple[ReplyPart, ...]
    model: Optional[str] = None
