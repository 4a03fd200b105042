"""
Request orchestration for every generation flow.

Each flow validates its input, builds a prompt, runs the collaborator call
under retry and turns the outcome into a result the HTTP layer can send.
For streamed flows only establishing the stream is retried; once the first
event has arrived, later failures end the stream without another attempt.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

from ..aggregation.manager import TrendAggregator
from ..models.generation import (
    FailureInfo,
    GenerationReply,
    GenerationRequest,
    RetryPolicy,
)
from ..models.research import RefinementContext, ResearchResult, ResearchSource, ScriptOptions
from ..models.trends import AvatarProfile, Trend, TrendSuggestion
from ..prompts.platform import SUPPORTED_PLATFORMS, get_platform_prompt
from ..prompts.refinement import (
    REFINEMENT_SUGGESTIONS,
    build_multi_turn_refinement_prompt,
    build_refinement_prompt,
)
from ..prompts.script_prompts import CHAT_SYSTEM_INSTRUCTION, build_script_prompt
from ..prompts.trends import NO_TRENDS_DIGEST, build_digest_prompt
from ..research.exa_researcher import ExaResearcher
from ..resilience.errors import (
    CollaboratorError,
    PromptBuildError,
    RequestValidationError,
    UnexpectedReplyError,
    classify,
    error_body,
    status_for,
    truncated_traceback,
)
from ..resilience.retry import Sleep, retry_with_backoff
from ..trends.analyzer import DEFAULT_BATCH_SIZE, batch_analyze_trends
from .relay import PrimedStream, StreamRelay, relay_to_body
from .service import GenerationService


logger = logging.getLogger(__name__)

CHAT_MAX_TOKENS = 4096
SCRIPT_MAX_TOKENS = 8192
PLATFORM_MAX_TOKENS = 4096
DIGEST_MAX_TOKENS = 1024
MAX_TOPIC_LENGTH = 1000
MAX_SUGGESTIONS = 10


# Prompt modes. Exactly one is built per chat request.

@dataclass(frozen=True)
class PlainChat:
    message: str


@dataclass(frozen=True)
class ResearchGeneration:
    message: str
    research: ResearchResult
    options: Optional[ScriptOptions] = None


@dataclass(frozen=True)
class Refinement:
    instruction: str
    current_script: str
    sources: list[ResearchSource]
    options: Optional[ScriptOptions] = None
    history: tuple[str, ...] = ()


PromptMode = Union[PlainChat, ResearchGeneration, Refinement]


def select_prompt_mode(
    message: str,
    research_context: Optional[ResearchResult] = None,
    refinement_context: Optional[RefinementContext] = None,
    script_options: Optional[ScriptOptions] = None,
) -> PromptMode:
    """Refinement context wins over research context, which wins over plain chat."""
    if refinement_context is not None:
        return Refinement(
            instruction=message,
            current_script=refinement_context.original_script,
            sources=refinement_context.sources.sources,
            options=script_options,
        )
    if research_context is not None:
        return ResearchGeneration(message=message, research=research_context, options=script_options)
    return PlainChat(message=message)


def build_generation_request(mode: PromptMode) -> GenerationRequest:
    """Turn a prompt mode into the request sent to the generation service."""
    try:
        if isinstance(mode, Refinement):
            if mode.history:
                prompt = build_multi_turn_refinement_prompt(
                    mode.current_script, list(mode.history), mode.instruction, mode.sources, mode.options
                )
            else:
                prompt = build_refinement_prompt(
                    mode.current_script, mode.instruction, mode.sources, mode.options
                )
            return GenerationRequest(prompt_text=prompt, max_output_tokens=SCRIPT_MAX_TOKENS)

        if isinstance(mode, ResearchGeneration):
            prompt = build_script_prompt(mode.research.query, mode.research.sources, mode.options)
            return GenerationRequest(prompt_text=prompt, max_output_tokens=SCRIPT_MAX_TOKENS)

        if isinstance(mode, PlainChat):
            return GenerationRequest(
                prompt_text=mode.message,
                max_output_tokens=CHAT_MAX_TOKENS,
                system_instruction=CHAT_SYSTEM_INSTRUCTION,
            )
    except Exception as e:
        raise PromptBuildError(f"Failed to build prompt: {e}") from e

    raise TypeError(f"Unknown prompt mode: {type(mode).__name__}")


def extract_text(reply: GenerationReply) -> str:
    """Text of the first reply part; anything else is an unexpected reply."""
    if not reply.parts or reply.parts[0].kind != "text" or reply.parts[0].text is None:
        raise UnexpectedReplyError("Unexpected response type from generation service")
    return reply.parts[0].text


# Results handed to the HTTP layer

@dataclass
class StreamingResult:
    body: AsyncIterator[bytes]
    relay: StreamRelay
    status_code: int = 200


@dataclass
class JsonResult:
    body: dict
    status_code: int = 200


@dataclass
class ErrorResult:
    status_code: int
    body: dict = field(default_factory=dict)


OrchestratorResult = Union[StreamingResult, JsonResult, ErrorResult]


def _timestamp() -> str:
    return datetime.now().isoformat()


class RequestOrchestrator:
    """
    Composition root for all flows.

    Holds no per-request state; every call builds its own request, policy
    use and relay, so concurrent requests never share mutable data.
    """

    def __init__(
        self,
        generation: GenerationService,
        researcher: Optional[ExaResearcher] = None,
        trend_aggregator: Optional[TrendAggregator] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Sleep = asyncio.sleep,
        establish_timeout: Optional[float] = None,
        idle_timeout: Optional[float] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.generation = generation
        self.researcher = researcher
        self.trend_aggregator = trend_aggregator or TrendAggregator()
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.establish_timeout = establish_timeout
        self.idle_timeout = idle_timeout
        self.batch_size = batch_size

    # Shared plumbing

    def _observer(self, flow: str) -> Callable[[int, FailureInfo], None]:
        def on_retry(attempt: int, failure: FailureInfo):
            logger.warning(
                f"[{flow}] Retry attempt {attempt}: {failure.message}",
                extra={"flow": flow, "attempt": attempt, "status_code": failure.status_code},
            )
        return on_retry

    async def _with_retry(self, flow: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        return await retry_with_backoff(
            operation,
            policy=self.retry_policy,
            on_retry=self._observer(flow),
            sleep=self.sleep,
        )

    async def _establish(self, request: GenerationRequest) -> PrimedStream:
        """Open the stream and wait for its first event."""
        async def open_and_prime() -> PrimedStream:
            events = await self.generation.open_stream(request)
            return await PrimedStream.open(events)

        if self.establish_timeout is None:
            return await open_and_prime()
        try:
            return await asyncio.wait_for(open_and_prime(), timeout=self.establish_timeout)
        except asyncio.TimeoutError as e:
            raise CollaboratorError(FailureInfo(
                message=f"Stream establishment timeout after {self.establish_timeout:g}s",
                raw_cause=e,
            )) from e

    async def _stream(self, flow: str, request: GenerationRequest) -> StreamingResult:
        stream = await self._with_retry(flow, lambda: self._establish(request))
        stream_relay = StreamRelay(idle_timeout=self.idle_timeout)
        logger.info(f"[{flow}] Stream established", extra={"flow": flow})
        return StreamingResult(body=relay_to_body(stream, stream_relay), relay=stream_relay)

    async def _complete_text(self, flow: str, request: GenerationRequest) -> str:
        async def attempt() -> str:
            return extract_text(await self.generation.complete(request))
        return await self._with_retry(flow, attempt)

    def _failure(self, flow: str, exc: Exception) -> ErrorResult:
        """Turn a terminal failure into a structured error result."""
        if isinstance(exc, RequestValidationError):
            logger.info(f"[{flow}] Rejected request: {exc.message}", extra={"flow": flow, "status_code": 400})
            return ErrorResult(400, error_body(exc.message, exc.message, exc.suggestion))

        failure = FailureInfo.from_exception(exc)
        classified = classify(failure)
        status_code = status_for(classified.category, failure.status_code)
        logger.error(
            f"[{flow}] Request failed: {failure.message}\n{truncated_traceback(exc)}",
            extra={
                "flow": flow,
                "category": classified.category.value,
                "status_code": status_code,
            },
        )
        return ErrorResult(
            status_code,
            error_body(classified.user_message, failure.message, classified.suggestion),
        )

    # Streamed flows

    async def chat(
        self,
        message: Optional[str],
        research_context: Optional[ResearchResult] = None,
        refinement_context: Optional[RefinementContext] = None,
        script_options: Optional[ScriptOptions] = None,
    ) -> OrchestratorResult:
        """Plain chat, script generation from research, or refinement."""
        flow = "chat"
        try:
            if not message:
                raise RequestValidationError("Message is required")
            mode = select_prompt_mode(message, research_context, refinement_context, script_options)
            logger.info(f"[{flow}] Prompt mode: {type(mode).__name__}", extra={"flow": flow})
            request = build_generation_request(mode)
            return await self._stream(flow, request)
        except Exception as e:
            return self._failure(flow, e)

    async def refine(
        self,
        current_script: Optional[str],
        refinement_instruction: Optional[str],
        sources: Optional[list[ResearchSource]],
        script_options: Optional[ScriptOptions] = None,
        history: Optional[list[str]] = None,
    ) -> OrchestratorResult:
        """Stream a refined version of an existing script."""
        flow = "refine"
        try:
            if not current_script:
                raise RequestValidationError("Current script is required")
            if not refinement_instruction or not refinement_instruction.strip():
                raise RequestValidationError(
                    "Please provide a refinement instruction",
                    "Try something like: 'Make it shorter', 'Add more statistics', "
                    "or 'Make the tone more casual'",
                )
            if not sources:
                raise RequestValidationError(
                    "Research sources are required for refinement",
                    "Sources are needed to maintain citation accuracy",
                )

            logger.info(
                f"[{flow}] Refining {len(current_script)} chars with {len(sources)} sources",
                extra={"flow": flow},
            )
            mode = Refinement(
                instruction=refinement_instruction,
                current_script=current_script,
                sources=sources,
                options=script_options,
                history=tuple(history or ()),
            )
            return await self._stream(flow, build_generation_request(mode))
        except Exception as e:
            return self._failure(flow, e)

    def refinement_suggestions(self) -> OrchestratorResult:
        return JsonResult({"suggestions": REFINEMENT_SUGGESTIONS})

    # Single-shot flows

    async def research(self, topic: Any) -> OrchestratorResult:
        """Research a topic and return its ranked sources."""
        flow = "research"
        try:
            if not topic or not isinstance(topic, str):
                raise RequestValidationError("Topic is required and must be a string")
            if not topic.strip():
                raise RequestValidationError("Topic cannot be empty")
            if len(topic) > MAX_TOPIC_LENGTH:
                raise RequestValidationError(f"Topic is too long (max {MAX_TOPIC_LENGTH} characters)")
            if self.researcher is None:
                raise CollaboratorError(FailureInfo(message="Research api key is not configured", status_code=401))

            result = await self._with_retry(flow, lambda: self.researcher.research(topic))
            return JsonResult(result.to_json_dict())
        except Exception as e:
            return self._failure(flow, e)

    async def generate_platform(
        self,
        platform: Optional[str],
        youtube_script: Optional[str],
        topic: Optional[str] = None,
        sources: Optional[list[ResearchSource]] = None,
    ) -> OrchestratorResult:
        """Repurpose a video script as a blog post or a tweet thread."""
        flow = "generate-platform"
        try:
            if not platform or not youtube_script:
                raise RequestValidationError("Platform and YouTube script are required")
            if platform not in SUPPORTED_PLATFORMS:
                raise RequestValidationError(
                    f"Invalid platform. Currently supported: {', '.join(SUPPORTED_PLATFORMS)}"
                )

            platform_prompt = get_platform_prompt(platform)
            try:
                prompt = platform_prompt.build_user_prompt(topic or "the topic", sources or [], youtube_script)
            except Exception as e:
                raise PromptBuildError(f"Failed to build prompt: {e}") from e

            request = GenerationRequest(
                prompt_text=prompt,
                max_output_tokens=PLATFORM_MAX_TOKENS,
                system_instruction=platform_prompt.system_prompt,
            )
            content = await self._complete_text(flow, request)
            return JsonResult({"content": content, "platform": platform, "timestamp": _timestamp()})
        except Exception as e:
            return self._failure(flow, e)

    async def scrape_trends(self, sources: Optional[list[str]] = None) -> OrchestratorResult:
        """Scrape, deduplicate and rank trends from the requested providers."""
        flow = "trends-scrape"
        try:
            selected = sources if sources is not None else ["reddit", "youtube", "google_trends"]
            trends = await self.trend_aggregator.scrape(selected)
            return JsonResult({
                "trends": [t.to_json_dict() for t in trends],
                "count": len(trends),
                "timestamp": _timestamp(),
            })
        except Exception as e:
            return self._failure(flow, e)

    async def analyze_trends(
        self,
        trends: Optional[list[Trend]],
        avatar: Optional[AvatarProfile],
    ) -> OrchestratorResult:
        """Score trends for an avatar and return the most relevant ones."""
        flow = "trends-analyze"
        try:
            if trends is None:
                raise RequestValidationError("Trends array is required")
            if avatar is None or not avatar.name:
                raise RequestValidationError("Avatar profile is required")

            suggestions = await batch_analyze_trends(
                trends,
                avatar,
                lambda request: self._complete_text(flow, request),
                batch_size=self.batch_size,
            )
            return JsonResult({
                "suggestions": [s.to_json_dict() for s in suggestions[:MAX_SUGGESTIONS]],
                "avatarName": avatar.name,
                "analyzedCount": len(trends),
                "relevantCount": len(suggestions),
                "timestamp": _timestamp(),
            })
        except Exception as e:
            return self._failure(flow, e)

    async def digest_trends(
        self,
        suggestions: Optional[list[TrendSuggestion]],
        avatar_name: Optional[str],
    ) -> OrchestratorResult:
        """Write a short digest of relevant trends for an avatar."""
        flow = "trends-digest"
        try:
            if not suggestions:
                return JsonResult({"digest": NO_TRENDS_DIGEST, "trendCount": 0, "timestamp": _timestamp()})

            try:
                prompt = build_digest_prompt(suggestions, avatar_name or "Creator")
            except Exception as e:
                raise PromptBuildError(f"Failed to build prompt: {e}") from e

            request = GenerationRequest(prompt_text=prompt, max_output_tokens=DIGEST_MAX_TOKENS)
            digest = await self._complete_text(flow, request)
            return JsonResult({
                "digest": digest,
                "trendCount": len(suggestions),
                "timestamp": _timestamp(),
            })
        except Exception as e:
            return self._failure(flow, e)
