"""Reddit trend provider using the OAuth API."""

import os
from typing import Optional
import httpx
import logging

from .base import BaseTrendProvider
from .token_cache import AccessTokenCache
from ..models.generation import FailureInfo
from ..models.trends import Trend
from ..resilience.errors import CollaboratorError


logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"

# Posts below either threshold are not treated as trends
MIN_SCORE = 50
MIN_COMMENTS = 10


class RedditTrendProvider(BaseTrendProvider):
    """
    Hot posts from a set of subreddits.
    Uses REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET env variables.
    Falls back to public API if credentials not available.
    """

    source_type = "reddit"

    def __init__(
        self,
        subreddits: Optional[list[str]] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        user_agent: Optional[str] = None,
        time_filter: str = "day",
        limit: int = 25,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.subreddits = subreddits or ["technology", "science", "videos", "youtubers"]
        self.client_id = client_id or os.getenv("REDDIT_CLIENT_ID")
        self.client_secret = client_secret or os.getenv("REDDIT_CLIENT_SECRET")
        self.user_agent = user_agent or os.getenv("REDDIT_USER_AGENT", "ScriptFlowAI/1.0")
        self.time_filter = time_filter
        self.limit = limit
        self._transport = transport
        self.token_cache = AccessTokenCache(self._request_token)

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=10.0, transport=self._transport)

    async def _request_token(self) -> tuple[str, float]:
        """Client-credentials grant against Reddit's token endpoint."""
        async with self._client() as client:
            response = await client.post(
                TOKEN_URL,
                auth=(self.client_id, self.client_secret),
                data={"grant_type": "client_credentials"},
                headers={"User-Agent": self.user_agent},
            )
        if response.status_code != 200:
            raise CollaboratorError(FailureInfo(
                message=f"Reddit auth failed: {response.reason_phrase}",
                status_code=response.status_code,
            ))
        data = response.json()
        return data["access_token"], float(data["expires_in"])

    async def _headers_and_base(self) -> tuple[dict, str]:
        if self.has_credentials:
            token = await self.token_cache.get_token()
            return (
                {"Authorization": f"Bearer {token}", "User-Agent": self.user_agent},
                "https://oauth.reddit.com",
            )
        return {"User-Agent": self.user_agent}, "https://www.reddit.com"

    async def fetch(self) -> list[Trend]:
        """Fetch hot posts from every configured subreddit."""
        trends = []
        headers, base_url = await self._headers_and_base()

        async with self._client() as client:
            for subreddit in self.subreddits:
                try:
                    trends.extend(await self._fetch_subreddit(client, headers, base_url, subreddit))
                except Exception as e:
                    logger.error(f"Failed to scrape r/{subreddit}: {e}")

        return self.sort_by_engagement(trends)

    async def _fetch_subreddit(
        self,
        client: httpx.AsyncClient,
        headers: dict,
        base_url: str,
        subreddit: str,
    ) -> list[Trend]:
        suffix = ".json" if "oauth" not in base_url else ""
        response = await client.get(
            f"{base_url}/r/{subreddit}/hot{suffix}",
            headers=headers,
            params={"limit": self.limit, "t": self.time_filter},
        )
        response.raise_for_status()

        trends = []
        for child in response.json().get("data", {}).get("children", []):
            trend = self._parse_post(child.get("data", {}))
            if trend:
                trends.append(trend)
        return trends

    def _parse_post(self, post: dict) -> Optional[Trend]:
        """Turn a post into a Trend if it has enough engagement."""
        title = post.get("title")
        score = post.get("score", 0)
        comments = post.get("num_comments", 0)
        if not title or score <= MIN_SCORE or comments <= MIN_COMMENTS:
            return None

        return Trend(
            id=f"reddit-{post.get('id', '')}",
            source="reddit",
            title=title,
            url=f"https://reddit.com{post.get('permalink', '')}",
            description=(post.get("selftext") or "")[:500] or None,
            raw_data={
                "subreddit": post.get("subreddit_name_prefixed"),
                "author": post.get("author"),
                "created": post.get("created_utc"),
            },
            engagement_score=score + comments,
            keywords=Trend.extract_keywords(title),
        )
