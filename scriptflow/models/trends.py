"""
Trend models for scraped items, creator avatars and relevance suggestions.
"""

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from .base import CamelModel


class Trend(CamelModel):
    """
    Unified trend model for all providers.
    Every Reddit post, popular video or rising search term
    gets normalized to this format.
    """

    id: str
    source: str = Field(..., description="reddit, youtube, google_trends")
    title: str
    url: Optional[str] = None
    description: Optional[str] = None
    raw_data: dict[str, Any] = Field(default_factory=dict)
    engagement_score: float = 0.0
    detected_at: datetime = Field(default_factory=datetime.now)
    keywords: list[str] = Field(default_factory=list)

    @staticmethod
    def extract_keywords(text: str) -> list[str]:
        """Lower-case words longer than three characters, punctuation stripped."""
        cleaned = re.sub(r"[^\w\s]", "", text.lower())
        return [word for word in cleaned.split() if len(word) > 3][:10]


class AvatarProfile(CamelModel):
    """The creator persona trends are scored against."""

    name: str = ""
    description: str = ""
    interests: Any = Field(default_factory=list)
    tone: str = ""
    audience_level: str = ""


class TrendSuggestion(CamelModel):
    """A trend judged relevant for an avatar."""

    id: str
    trend: Trend
    avatar_name: str
    relevance_score: float
    suggested_angle: str = ""
    why_relevant: str = ""
    urgency: Optional[str] = None
    suggested_at: datetime = Field(default_factory=datetime.now)
