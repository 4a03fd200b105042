"""YouTube trend provider using the Data API v3 most-popular chart."""

import os
from typing import Optional
import httpx
import logging

from .base import BaseTrendProvider
from ..models.generation import FailureInfo
from ..models.trends import Trend
from ..resilience.errors import CollaboratorError
from ..resilience.retry import retry_if_retryable


logger = logging.getLogger(__name__)

VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"


class YouTubeTrendProvider(BaseTrendProvider):
    """
    Most popular videos for a region and category.
    Requires YOUTUBE_API_KEY.
    """

    source_type = "youtube"

    def __init__(
        self,
        api_key: Optional[str] = None,
        category_id: Optional[str] = "28",
        region_code: str = "US",
        max_results: int = 25,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.api_key = api_key or os.getenv("YOUTUBE_API_KEY")
        self.category_id = category_id
        self.region_code = region_code
        self.max_results = max_results
        self._transport = transport

    async def fetch(self) -> list[Trend]:
        if not self.api_key:
            raise CollaboratorError(FailureInfo(message="YouTube API key not configured", status_code=401))

        params = {
            "key": self.api_key,
            "part": "snippet,statistics",
            "chart": "mostPopular",
            "regionCode": self.region_code,
            "maxResults": self.max_results,
        }
        if self.category_id:
            params["videoCategoryId"] = self.category_id

        async def request() -> dict:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.get(VIDEOS_URL, params=params)
            if response.status_code != 200:
                raise CollaboratorError(FailureInfo(
                    message=f"Failed to fetch YouTube trends: {response.text[:200]}",
                    status_code=response.status_code,
                ))
            return response.json()

        data = await retry_if_retryable(request)
        trends = [self._parse_video(item) for item in data.get("items", [])]
        return self.sort_by_engagement([t for t in trends if t])

    def _parse_video(self, video: dict) -> Optional[Trend]:
        snippet = video.get("snippet") or {}
        stats = video.get("statistics") or {}
        title = snippet.get("title")
        if not title:
            return None

        views = int(stats.get("viewCount", 0) or 0)
        likes = int(stats.get("likeCount", 0) or 0)
        comments = int(stats.get("commentCount", 0) or 0)

        return Trend(
            id=f"youtube-{video.get('id')}",
            source="youtube",
            title=title,
            url=f"https://youtube.com/watch?v={video.get('id')}",
            description=(snippet.get("description") or "")[:500] or None,
            raw_data={
                "channelTitle": snippet.get("channelTitle"),
                "publishedAt": snippet.get("publishedAt"),
                "categoryId": snippet.get("categoryId"),
            },
            engagement_score=views / 1000 + likes + comments,
            keywords=Trend.extract_keywords(title),
        )
