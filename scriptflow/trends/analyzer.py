"""
Trend relevance analysis against a creator avatar.

Each trend is scored by a single-shot generation call. Trends are analyzed
in fixed-size batches; a batch runs concurrently and is joined before the
next one starts.
"""

import asyncio
import json
import re
import time
from typing import Awaitable, Callable, Optional
import logging

from ..models.generation import GenerationRequest
from ..models.trends import AvatarProfile, Trend, TrendSuggestion
from ..prompts.trends import build_trend_relevance_prompt


logger = logging.getLogger(__name__)

RELEVANCE_MAX_TOKENS = 1024
MIN_RELEVANCE_SCORE = 0.5
DEFAULT_BATCH_SIZE = 5

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

CompleteText = Callable[[GenerationRequest], Awaitable[str]]


def parse_relevance_reply(text: str) -> dict:
    """Pull the JSON object out of a reply, tolerating markdown fences."""
    match = _JSON_OBJECT.search(text)
    if not match:
        raise ValueError("No JSON found in response")
    return json.loads(match.group(0))


async def analyze_trend_relevance(
    trend: Trend,
    avatar: AvatarProfile,
    complete_text: CompleteText,
) -> Optional[TrendSuggestion]:
    """
    Score one trend for an avatar.

    Returns None when the trend is judged irrelevant or when the analysis
    fails for any reason; one bad trend never fails the batch.
    """
    request = GenerationRequest(
        prompt_text=build_trend_relevance_prompt(trend, avatar),
        max_output_tokens=RELEVANCE_MAX_TOKENS,
    )

    try:
        analysis = parse_relevance_reply(await complete_text(request))

        score = analysis.get("relevance_score") or 0
        if not analysis.get("is_relevant") or score < MIN_RELEVANCE_SCORE:
            return None

        return TrendSuggestion(
            id=f"suggestion-{trend.id}-{int(time.time() * 1000)}",
            trend=trend,
            avatar_name=avatar.name,
            relevance_score=score,
            suggested_angle=analysis.get("suggested_angle") or "",
            why_relevant=analysis.get("reasoning") or "",
            urgency=analysis.get("urgency"),
        )
    except Exception as e:
        logger.error(f"Trend analysis failed for '{trend.title[:60]}': {e}")
        return None


async def analyze_in_batches(
    trends: list[Trend],
    avatar: AvatarProfile,
    complete_text: CompleteText,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[Optional[TrendSuggestion]]:
    """One result per input trend, in input order."""
    results: list[Optional[TrendSuggestion]] = []
    for start in range(0, len(trends), batch_size):
        batch = trends[start:start + batch_size]
        logger.debug(f"Analyzing trends {start + 1}-{start + len(batch)} of {len(trends)}")
        results.extend(await asyncio.gather(
            *(analyze_trend_relevance(trend, avatar, complete_text) for trend in batch)
        ))
    return results


async def batch_analyze_trends(
    trends: list[Trend],
    avatar: AvatarProfile,
    complete_text: CompleteText,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[TrendSuggestion]:
    """Relevant suggestions only, most relevant first."""
    results = await analyze_in_batches(trends, avatar, complete_text, batch_size)
    suggestions = [s for s in results if s is not None]
    logger.info(f"{len(suggestions)}/{len(trends)} trends relevant for {avatar.name}")
    return sorted(suggestions, key=lambda s: s.relevance_score, reverse=True)
