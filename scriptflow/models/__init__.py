from .base import CamelModel
from .generation import (
    Attempt,
    ErrorCategory,
    FailureInfo,
    GenerationReply,
    GenerationRequest,
    ReplyPart,
    RetryPolicy,
    StreamEvent,
    StreamEventKind,
)
from .research import (
    RefinementContext,
    ResearchResult,
    ResearchSource,
    ResearchSynthesis,
    ScriptOptions,
    ScriptStructure,
    ScriptTone,
    VideoLength,
)
from .trends import AvatarProfile, Trend, TrendSuggestion

__all__ = [
    "CamelModel",
    "Attempt",
    "ErrorCategory",
    "FailureInfo",
    "GenerationReply",
    "GenerationRequest",
    "ReplyPart",
    "RetryPolicy",
    "StreamEvent",
    "StreamEventKind",
    "RefinementContext",
    "ResearchResult",
    "ResearchSource",
    "ResearchSynthesis",
    "ScriptOptions",
    "ScriptStructure",
    "ScriptTone",
    "VideoLength",
    "AvatarProfile",
    "Trend",
    "TrendSuggestion",
]
