"""
Research models for sources, results and synthesized briefs.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelModel


class ResearchSource(CamelModel):
    """A single ranked document returned by the search provider."""

    id: str
    title: str
    url: str
    summary: str
    published_date: Optional[str] = None
    author: Optional[str] = None
    text: Optional[str] = None
    score: Optional[float] = None
    highlights: Optional[list[str]] = None


class ResearchResult(CamelModel):
    """All sources found for a query."""

    query: str
    sources: list[ResearchSource] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)


class ScriptStructure(str, Enum):
    HOOK_PROBLEM_SOLUTION = "hook-problem-solution"
    STORYTELLING = "storytelling"
    LISTICLE = "listicle"
    EDUCATIONAL_DEEP_DIVE = "educational-deep-dive"
    COMMENTARY_ANALYSIS = "commentary-analysis"
    NEWS_BREAKDOWN = "news-breakdown"


class ScriptTone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    ENERGETIC = "energetic"
    AUTHORITATIVE = "authoritative"


class VideoLength(str, Enum):
    SHORT = "short"  # 3-5 min
    MEDIUM = "medium"  # 8-10 min
    LONG = "long"  # 15-20 min


class ScriptOptions(CamelModel):
    """How the generated script should be shaped."""

    structure: ScriptStructure = ScriptStructure.HOOK_PROBLEM_SOLUTION
    tone: ScriptTone = ScriptTone.PROFESSIONAL
    length: VideoLength = VideoLength.MEDIUM
    include_citations: bool = True


class ResearchSynthesis(CamelModel):
    """Heuristic brief distilled from a set of sources."""

    key_themes: list[str] = Field(default_factory=list)
    main_points: list[str] = Field(default_factory=list)
    consensus: str = ""
    contradictions: list[str] = Field(default_factory=list)
    most_recent_source: Optional[ResearchSource] = None
    most_authoritative_source: Optional[ResearchSource] = None


class RefinementContext(CamelModel):
    """The script being refined plus the research it was written from."""

    original_script: str
    sources: ResearchResult
