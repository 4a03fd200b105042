"""Generation service, stream relay and request orchestration."""

from .orchestrator import (
    ErrorResult,
    JsonResult,
    PlainChat,
    Refinement,
    RequestOrchestrator,
    ResearchGeneration,
    StreamingResult,
    build_generation_request,
    extract_text,
    select_prompt_mode,
)
from .relay import ChannelSink, PrimedStream, RelayState, StreamRelay, relay, relay_to_body
from .service import GeminiGenerationService, GenerationService, failure_from_gemini

__all__ = [
    "ErrorResult",
    "JsonResult",
    "PlainChat",
    "Refinement",
    "RequestOrchestrator",
    "ResearchGeneration",
    "StreamingResult",
    "build_generation_request",
    "extract_text",
    "select_prompt_mode",
    "ChannelSink",
    "PrimedStream",
    "RelayState",
    "StreamRelay",
    "relay",
    "relay_to_body",
    "GeminiGenerationService",
    "GenerationService",
    "failure_from_gemini",
]
