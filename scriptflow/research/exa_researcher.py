"""Exa.ai researcher returning ranked sources for a topic."""

import asyncio
import os
import time
from typing import Optional
import logging

from exa_py import Exa

from ..models.generation import FailureInfo
from ..models.research import ResearchResult, ResearchSource
from ..resilience.errors import CollaboratorError


logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "No summary available"


class ExaResearcher:
    """
    Exa.ai researcher for topic research.

    The search call is blocking, so it runs in a worker thread and is raced
    against a timer; if the timer wins the call surfaces as a timeout.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout_seconds: float = 30.0,
        num_results: int = 10,
    ):
        self.api_key = api_key or os.getenv("EXA_API_KEY")
        self.timeout_seconds = timeout_seconds
        self.num_results = num_results
        self._client: Optional[Exa] = None

    @property
    def client(self) -> Exa:
        """Lazy load the Exa client."""
        if self._client is None:
            if not self.api_key:
                raise CollaboratorError(FailureInfo(
                    message="EXA_API_KEY is not configured. Add your Exa api key to the environment.",
                    status_code=401,
                ))
            self._client = Exa(api_key=self.api_key)
        return self._client

    async def research(self, topic: str) -> ResearchResult:
        """
        Research a topic and return its sources in ranked order.
        """
        if not topic or not topic.strip():
            raise ValueError("Topic cannot be empty")

        client = self.client

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    client.search_and_contents,
                    topic,
                    type="auto",
                    num_results=self.num_results,
                    text=True,
                    highlights=True,
                    summary=True,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise CollaboratorError(FailureInfo(
                message=f"Research timeout after {self.timeout_seconds:g} seconds",
                raw_cause=e,
            )) from e
        except Exception as e:
            failure = FailureInfo.from_exception(e)
            raise CollaboratorError(FailureInfo(
                message=f"Research failed: {failure.message}",
                status_code=failure.status_code,
                raw_cause=e,
            )) from e

        stamp = int(time.time() * 1000)
        sources = [
            self._to_source(result, index, stamp)
            for index, result in enumerate(response.results)
        ]

        logger.info(f"Found {len(sources)} sources for '{topic[:60]}'")
        return ResearchResult(query=topic, sources=sources)

    def _to_source(self, result, index: int, stamp: int) -> ResearchSource:
        """Map an Exa result onto a ResearchSource."""
        text = getattr(result, "text", None)
        summary = getattr(result, "summary", None)
        if not summary:
            summary = f"{text[:300]}..." if text else SUMMARY_FALLBACK

        return ResearchSource(
            id=f"source-{stamp}-{index}",
            title=getattr(result, "title", None) or "Untitled",
            url=getattr(result, "url", None) or "",
            published_date=getattr(result, "published_date", None),
            author=getattr(result, "author", None),
            summary=summary,
            text=text,
            score=getattr(result, "score", None),
            highlights=getattr(result, "highlights", None),
        )
