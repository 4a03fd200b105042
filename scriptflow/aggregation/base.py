"""Base class for trend providers."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
import logging

from ..models.trends import Trend


logger = logging.getLogger(__name__)


class BaseTrendProvider(ABC):
    """
    Abstract base class for trend providers.
    All providers must implement the fetch method.
    """

    source_type: str = ""

    def __init__(self):
        self.last_fetch: Optional[datetime] = None
        self.fetch_count = 0
        self.error_count = 0
        self.last_error: Optional[str] = None

    @abstractmethod
    async def fetch(self) -> list[Trend]:
        """
        Fetch trends from the source.

        Returns:
            Trends sorted by engagement score, highest first
        """
        pass

    async def fetch_with_tracking(self) -> list[Trend]:
        """
        Fetch with error tracking. A failing provider yields no trends.
        """
        try:
            logger.info(f"Fetching trends from {self.source_type}")
            results = await self.fetch()
            self.last_fetch = datetime.now()
            self.fetch_count += 1
            logger.info(f"Fetched {len(results)} trends from {self.source_type}")
            return results
        except Exception as e:
            self.error_count += 1
            self.last_error = str(e)
            logger.error(f"Error fetching from {self.source_type}: {e}")
            return []

    @staticmethod
    def sort_by_engagement(trends: list[Trend]) -> list[Trend]:
        return sorted(trends, key=lambda t: t.engagement_score or 0, reverse=True)

    def get_stats(self) -> dict:
        return {
            "source_type": self.source_type,
            "last_fetch": self.last_fetch.isoformat() if self.last_fetch else None,
            "fetch_count": self.fetch_count,
            "error_count": self.error_count,
            "last_error": self.last_error,
        }
