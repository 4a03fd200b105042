"""HTTP endpoints for every orchestrated flow."""

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from ...aggregation import (
    GoogleTrendsProvider,
    RedditTrendProvider,
    TrendAggregator,
    YouTubeTrendProvider,
)
from ...config.settings import TREND_SOURCES, Settings, get_settings
from ...generation.orchestrator import OrchestratorResult, RequestOrchestrator, StreamingResult
from ...generation.service import GeminiGenerationService
from ...research.exa_researcher import ExaResearcher
from ..schemas import (
    AnalyzeRequest,
    ChatRequest,
    DigestRequest,
    PlatformRequest,
    RefineRequest,
    ResearchRequest,
    ScrapeRequest,
)

router = APIRouter()

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def build_trend_aggregator(settings: Settings) -> TrendAggregator:
    reddit = TREND_SOURCES["reddit"]
    youtube = TREND_SOURCES["youtube"]
    google_trends = TREND_SOURCES["google_trends"]

    aggregator = TrendAggregator()
    aggregator.add_provider(RedditTrendProvider(
        subreddits=reddit["subreddits"],
        client_id=settings.reddit_client_id,
        client_secret=settings.reddit_client_secret,
        user_agent=settings.reddit_user_agent,
        time_filter=reddit["time_filter"],
        limit=reddit["post_limit"],
    ))
    aggregator.add_provider(YouTubeTrendProvider(
        api_key=settings.youtube_api_key,
        category_id=youtube["category_id"],
        region_code=youtube["region_code"],
        max_results=youtube["max_results"],
    ))
    aggregator.add_provider(GoogleTrendsProvider(
        keywords=google_trends["keywords"],
        geo=google_trends["geo"],
    ))
    return aggregator


def build_orchestrator(settings: Settings) -> RequestOrchestrator:
    return RequestOrchestrator(
        generation=GeminiGenerationService(
            api_key=settings.gemini_api_key,
            model=settings.generation_model,
        ),
        researcher=ExaResearcher(
            api_key=settings.exa_api_key,
            timeout_seconds=settings.research_timeout_seconds,
            num_results=settings.research_num_results,
        ),
        trend_aggregator=build_trend_aggregator(settings),
        retry_policy=settings.retry_policy(),
        establish_timeout=settings.stream_establish_timeout_seconds,
        idle_timeout=settings.stream_idle_timeout_seconds,
        batch_size=settings.trend_batch_size,
    )


@lru_cache()
def get_orchestrator() -> RequestOrchestrator:
    """Process-wide orchestrator; it keeps no per-request state."""
    return build_orchestrator(get_settings())


def to_response(result: OrchestratorResult):
    if isinstance(result, StreamingResult):
        return StreamingResponse(
            result.body,
            status_code=result.status_code,
            media_type="text/event-stream",
            headers=STREAM_HEADERS,
        )
    return JSONResponse(result.body, status_code=result.status_code)


@router.post("/chat")
async def chat(request: ChatRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    """Chat, generate a script from research, or refine a script (streamed)."""
    return to_response(await orchestrator.chat(
        request.message,
        research_context=request.research_context,
        refinement_context=request.refinement_context,
        script_options=request.script_options,
    ))


@router.post("/research")
async def research(request: ResearchRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    return to_response(await orchestrator.research(request.topic))


@router.post("/refine")
async def refine(request: RefineRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    """Stream a refined script."""
    return to_response(await orchestrator.refine(
        request.current_script,
        request.refinement_instruction,
        request.sources,
        script_options=request.script_options,
        history=request.history,
    ))


@router.get("/refine/suggestions")
async def refine_suggestions(orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    return to_response(orchestrator.refinement_suggestions())


@router.post("/generate-platform")
async def generate_platform(request: PlatformRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    return to_response(await orchestrator.generate_platform(
        request.platform,
        request.youtube_script,
        topic=request.topic,
        sources=request.sources,
    ))


@router.post("/trends/scrape")
async def scrape_trends(
    request: Optional[ScrapeRequest] = None,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    return to_response(await orchestrator.scrape_trends(request.sources if request else None))


@router.post("/trends/analyze")
async def analyze_trends(request: AnalyzeRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    return to_response(await orchestrator.analyze_trends(request.trends, request.avatar))


@router.post("/trends/digest")
async def digest_trends(request: DigestRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    return to_response(await orchestrator.digest_trends(request.suggestions, request.avatar_name))
