"""
Pytest configuration and fixtures for ScriptFlow tests.
"""

import os
import sys
import pytest
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment
os.environ['TESTING'] = '1'
os.environ.setdefault('GEMINI_API_KEY', 'test-api-key')

from scriptflow.models.generation import (  # noqa: E402
    GenerationReply,
    ReplyPart,
    RetryPolicy,
    StreamEvent,
)
from scriptflow.models.research import ResearchResult, ResearchSource  # noqa: E402
from scriptflow.models.trends import AvatarProfile, Trend  # noqa: E402


# ============================================================
# Fake Collaborators
# ============================================================

class FakeGenerationService:
    """
    Scripted stand-in for the Gemini service.

    ``streams`` holds one entry per ``open_stream`` call: an exception is
    raised when opening, a list is replayed as events (exceptions inside
    the list are raised mid-stream). ``replies`` works the same way for
    ``complete``. The last entry repeats once the script runs out.
    """

    def __init__(self, streams=None, replies=None):
        self.streams = list(streams or [])
        self.replies = list(replies or [])
        self.stream_requests = []
        self.complete_requests = []

    @staticmethod
    def _next(script, index):
        return script[min(index, len(script) - 1)]

    async def open_stream(self, request):
        index = len(self.stream_requests)
        self.stream_requests.append(request)
        step = self._next(self.streams, index)
        if isinstance(step, BaseException):
            raise step
        return self._replay(step)

    async def _replay(self, steps):
        for step in steps:
            if isinstance(step, BaseException):
                raise step
            yield step

    async def complete(self, request):
        index = len(self.complete_requests)
        self.complete_requests.append(request)
        step = self._next(self.replies, index)
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, GenerationReply):
            return step
        return GenerationReply(parts=(ReplyPart(kind="text", text=step),))


class RecordingSleep:
    """Instant replacement for asyncio.sleep that records each delay."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def deltas(*texts):
    return [StreamEvent.delta(t) for t in texts]


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fast_policy():
    return RetryPolicy(max_retries=3, base_delay_ms=1000, max_delay_ms=10000)


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_sources():
    """Two research sources with highlights and scores."""
    return [
        ResearchSource(
            id="source-1-0",
            title="Battery breakthrough doubles range",
            url="https://techcrunch.com/2024/battery",
            summary="Researchers report a positive increase in energy density for solid state cells.",
            published_date="2024-05-01T00:00:00Z",
            author="Jane Doe",
            score=0.91,
            highlights=["Solid state cells store twice the energy", "Short"],
        ),
        ResearchSource(
            id="source-1-1",
            title="Why solid state batteries are still years away",
            url="https://www.theverge.com/battery-analysis",
            summary="Analysts see a negative outlook and a decrease in funding for solid state cells.",
            published_date="2024-06-15T00:00:00Z",
            score=0.72,
            highlights=["Manufacturing costs remain very high"],
        ),
    ]


@pytest.fixture
def sample_research(sample_sources):
    return ResearchResult(query="solid state batteries", sources=sample_sources)


@pytest.fixture
def sample_avatar():
    return AvatarProfile(
        name="Tech Tina",
        description="Explains emerging tech to beginners",
        interests=["AI", "gadgets"],
        tone="casual",
        audience_level="beginner",
    )


@pytest.fixture
def sample_trends():
    """Seven trends, enough for one full batch plus a partial one."""
    return [
        Trend(
            id=f"trend-{i}",
            source="reddit",
            title=f"Trend number {i}",
            engagement_score=100 * i,
        )
        for i in range(1, 8)
    ]


@pytest.fixture
def fake_generation():
    """Factory for scripted generation services."""
    return FakeGenerationService


@pytest.fixture
def make_deltas():
    return deltas
