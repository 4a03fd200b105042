"""Trend aggregator combining all providers."""

import asyncio
from typing import Iterable, Optional
import logging

from .base import BaseTrendProvider
from ..models.trends import Trend


logger = logging.getLogger(__name__)

MAX_TRENDS = 50


class TrendAggregator:
    """
    Fetches from the requested providers concurrently, then
    deduplicates by title and ranks by engagement.
    """

    def __init__(self, providers: Optional[dict[str, BaseTrendProvider]] = None):
        self.providers: dict[str, BaseTrendProvider] = dict(providers or {})

    def add_provider(self, provider: BaseTrendProvider):
        self.providers[provider.source_type] = provider

    async def scrape(self, sources: Iterable[str]) -> list[Trend]:
        selected = [self.providers[s] for s in sources if s in self.providers]
        if not selected:
            logger.warning("No matching trend providers configured")
            return []

        results = await asyncio.gather(*(p.fetch_with_tracking() for p in selected))

        # Later duplicates replace earlier ones but keep the first position
        unique: dict[str, Trend] = {}
        for trends in results:
            for trend in trends:
                unique[trend.title.lower()] = trend

        ranked = sorted(unique.values(), key=lambda t: t.engagement_score or 0, reverse=True)
        logger.info(f"Aggregated {len(ranked)} unique trends from {len(selected)} providers")
        return ranked[:MAX_TRENDS]
