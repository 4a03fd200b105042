"""
Configuration settings for ScriptFlow
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.generation import RetryPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Gemini
    gemini_api_key: Optional[str] = Field(default=None)
    generation_model: str = Field(default="gemini-2.0-flash")

    # Exa search
    exa_api_key: Optional[str] = Field(default=None)
    research_timeout_seconds: float = Field(default=30.0, gt=0)
    research_num_results: int = Field(default=10, ge=1)

    # Reddit API
    reddit_client_id: Optional[str] = Field(default=None)
    reddit_client_secret: Optional[str] = Field(default=None)
    reddit_user_agent: str = Field(default="ScriptFlowAI/1.0")

    # YouTube Data API
    youtube_api_key: Optional[str] = Field(default=None)

    # Retry policy around generation and research calls
    retry_max_retries: int = Field(default=3, ge=1)
    retry_base_delay_ms: int = Field(default=1000, gt=0)
    retry_max_delay_ms: int = Field(default=10000, gt=0)

    # Stream timeouts (None disables them)
    stream_establish_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    stream_idle_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # Trend analysis
    trend_batch_size: int = Field(default=5, ge=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_json_file: Optional[str] = Field(default=None)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.retry_max_retries,
            base_delay_ms=self.retry_base_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
        )


YOUTUBE_CATEGORIES = {
    "SCIENCE_TECH": "28",
    "EDUCATION": "27",
    "GAMING": "20",
    "NEWS_POLITICS": "25",
    "ENTERTAINMENT": "24",
}

# Default scrape targets per trend provider
TREND_SOURCES = {
    "reddit": {
        "subreddits": ["technology", "science", "videos", "youtubers"],
        "time_filter": "day",
        "post_limit": 25,
    },
    "youtube": {
        "category_id": YOUTUBE_CATEGORIES["SCIENCE_TECH"],
        "region_code": "US",
        "max_results": 25,
    },
    "google_trends": {
        "keywords": ["AI", "technology", "science", "tutorial"],
        "geo": "US",
    },
}


@lru_cache()
def get_settings() -> Settings:
    """Get application settings singleton"""
    return Settings()
