"""Trend providers for Reddit, YouTube and Google Trends."""

from .base import BaseTrendProvider
from .google_trends import GoogleTrendsProvider, trend_velocity
from .manager import TrendAggregator
from .reddit import RedditTrendProvider
from .token_cache import AccessTokenCache
from .youtube import YouTubeTrendProvider

__all__ = [
    "BaseTrendProvider",
    "GoogleTrendsProvider",
    "trend_velocity",
    "TrendAggregator",
    "RedditTrendProvider",
    "AccessTokenCache",
    "YouTubeTrendProvider",
]
