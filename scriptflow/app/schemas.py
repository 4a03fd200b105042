"""
Request bodies for the HTTP API.

Fields the flows require are still declared optional here; the orchestrator
checks them so that missing input gets its specific 400 message.
"""

from typing import Any, Optional

from ..models.base import CamelModel
from ..models.research import RefinementContext, ResearchResult, ResearchSource, ScriptOptions
from ..models.trends import AvatarProfile, Trend, TrendSuggestion


class ChatRequest(CamelModel):
    message: Optional[str] = None
    research_context: Optional[ResearchResult] = None
    refinement_context: Optional[RefinementContext] = None
    script_options: Optional[ScriptOptions] = None


class ResearchRequest(CamelModel):
    # Any, so a non-string topic is rejected with the flow's own message
    topic: Any = None


class RefineRequest(CamelModel):
    current_script: Optional[str] = None
    refinement_instruction: Optional[str] = None
    sources: Optional[list[ResearchSource]] = None
    script_options: Optional[ScriptOptions] = None
    history: Optional[list[str]] = None


class PlatformRequest(CamelModel):
    platform: Optional[str] = None
    youtube_script: Optional[str] = None
    topic: Optional[str] = None
    sources: Optional[list[ResearchSource]] = None


class ScrapeRequest(CamelModel):
    sources: Optional[list[str]] = None


class AnalyzeRequest(CamelModel):
    trends: Optional[list[Trend]] = None
    avatar: Optional[AvatarProfile] = None


class DigestRequest(CamelModel):
    suggestions: Optional[list[TrendSuggestion]] = None
    avatar_name: Optional[str] = None
