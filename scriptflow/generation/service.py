"""Generation service contract and the Gemini implementation."""

import logging
import os
from typing import AsyncIterator, Optional, Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..models.generation import (
    FailureInfo,
    GenerationReply,
    GenerationRequest,
    ReplyPart,
    StreamEvent,
)
from ..resilience.errors import CollaboratorError


logger = logging.getLogger(__name__)


class GenerationService(Protocol):
    """What the orchestrator needs from an LLM backend."""

    async def open_stream(self, request: GenerationRequest) -> AsyncIterator[StreamEvent]:
        """Start a streamed generation. Failures to connect raise here."""
        ...

    async def complete(self, request: GenerationRequest) -> GenerationReply:
        """Run a single-shot generation."""
        ...


def failure_from_gemini(exc: Exception) -> FailureInfo:
    """Normalize Gemini SDK and transport exceptions."""
    if isinstance(exc, genai_errors.APIError):
        message = exc.message or str(exc)
        return FailureInfo(message=message, status_code=exc.code, raw_cause=exc)
    if isinstance(exc, httpx.TimeoutException):
        return FailureInfo(message=f"Generation request timeout: {exc}", raw_cause=exc)
    if isinstance(exc, httpx.TransportError):
        return FailureInfo(message=f"Network error contacting Gemini: {exc}", raw_cause=exc)
    return FailureInfo.from_exception(exc)


class GeminiGenerationService:
    """
    Gemini-backed generation service.

    Streamed chunks that carry text become text deltas; chunks without text
    (usage and finish metadata) become metadata events.
    """

    def __init__(self, api_key: Optional[str] = None, model: str = "gemini-2.0-flash"):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.model = model
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Lazy load the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise CollaboratorError(FailureInfo(
                    message="GEMINI_API_KEY not set. Configure your api key to enable generation.",
                    status_code=401,
                ))
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            max_output_tokens=request.max_output_tokens,
            system_instruction=request.system_instruction,
        )

    async def open_stream(self, request: GenerationRequest) -> AsyncIterator[StreamEvent]:
        try:
            chunks = await self.client.aio.models.generate_content_stream(
                model=self.model,
                contents=request.prompt_text,
                config=self._config(request),
            )
        except CollaboratorError:
            raise
        except Exception as e:
            raise CollaboratorError(failure_from_gemini(e)) from e

        logger.debug(f"Opened Gemini stream (max_tokens={request.max_output_tokens})")
        return self._events(chunks)

    async def _events(self, chunks) -> AsyncIterator[StreamEvent]:
        try:
            async for chunk in chunks:
                text = chunk.text
                if text:
                    yield StreamEvent.delta(text)
                else:
                    yield StreamEvent.metadata(chunk.usage_metadata)
        except Exception as e:
            raise CollaboratorError(failure_from_gemini(e)) from e

    async def complete(self, request: GenerationRequest) -> GenerationReply:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=request.prompt_text,
                config=self._config(request),
            )
        except CollaboratorError:
            raise
        except Exception as e:
            raise CollaboratorError(failure_from_gemini(e)) from e

        parts = []
        for candidate in (response.candidates or [])[:1]:
            content = candidate.content
            for part in (content.parts if content and content.parts else []):
                if part.text is not None:
                    parts.append(ReplyPart(kind="text", text=part.text))
                else:
                    parts.append(ReplyPart(kind="other"))

        return GenerationReply(parts=tuple(parts), model=self.model)
