"""Google Trends provider for rising search interest."""

import asyncio
import math
import re
import time
from typing import Callable, Optional
import logging

from pytrends.request import TrendReq

from .base import BaseTrendProvider
from ..models.trends import Trend


logger = logging.getLogger(__name__)

# Minimum relative growth for a keyword to count as trending
MIN_VELOCITY = 0.1


def trend_velocity(values: list[float]) -> tuple[float, float]:
    """
    Compare the last three points with the three before the last four.

    Returns (recent average, relative growth). Growth is 0 when there is
    no older baseline.
    """
    recent = values[-3:]
    older = values[-7:-4]
    recent_avg = sum(recent) / len(recent) if recent else 0.0
    older_avg = sum(older) / len(older) if older else 0.0
    velocity = (recent_avg - older_avg) / older_avg if older_avg > 0 else 0.0
    return recent_avg, velocity


class GoogleTrendsProvider(BaseTrendProvider):
    """Keywords whose search interest rose over the last week."""

    source_type = "google_trends"

    def __init__(
        self,
        keywords: Optional[list[str]] = None,
        geo: str = "US",
        client_factory: Callable[[], TrendReq] = lambda: TrendReq(hl="en-US", tz=360),
    ):
        super().__init__()
        self.keywords = keywords or ["AI", "technology", "science", "tutorial"]
        self.geo = geo
        self._client_factory = client_factory

    def _interest_values(self, client: TrendReq, keyword: str) -> list[float]:
        client.build_payload([keyword], timeframe="now 7-d", geo=self.geo)
        frame = client.interest_over_time()
        if frame is None or frame.empty or keyword not in frame:
            return []
        return [float(v) for v in frame[keyword].tolist()]

    async def fetch(self) -> list[Trend]:
        client = self._client_factory()
        trends = []

        for keyword in self.keywords:
            try:
                values = await asyncio.to_thread(self._interest_values, client, keyword)
            except Exception as e:
                logger.error(f'Failed to get trends for "{keyword}": {e}')
                continue

            if not values:
                continue

            recent_avg, velocity = trend_velocity(values)
            if velocity <= MIN_VELOCITY:
                continue

            slug = re.sub(r"\s+", "-", keyword)
            trends.append(Trend(
                id=f"gtrends-{slug}-{int(time.time() * 1000)}",
                source="google_trends",
                title=f'"{keyword}" is trending',
                description=f"Search interest up {velocity * 100:.0f}% in the last 3 days",
                raw_data={
                    "keyword": keyword,
                    "currentInterest": recent_avg,
                    "velocity": velocity,
                    "geo": self.geo,
                },
                engagement_score=math.floor(recent_avg * (1 + velocity)),
                keywords=[keyword],
            ))

        return self.sort_by_engagement(trends)
