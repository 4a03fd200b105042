"""Prompt builders. Pure functions from structured inputs to prompt text."""

from .citations import extract_publication_name, format_sources_with_natural_citations
from .platform import SUPPORTED_PLATFORMS, get_platform_prompt
from .refinement import (
    REFINEMENT_SUGGESTIONS,
    build_multi_turn_refinement_prompt,
    build_refinement_prompt,
)
from .script_prompts import CHAT_SYSTEM_INSTRUCTION, build_script_prompt
from .trends import NO_TRENDS_DIGEST, build_digest_prompt, build_trend_relevance_prompt

__all__ = [
    "extract_publication_name",
    "format_sources_with_natural_citations",
    "SUPPORTED_PLATFORMS",
    "get_platform_prompt",
    "REFINEMENT_SUGGESTIONS",
    "build_multi_turn_refinement_prompt",
    "build_refinement_prompt",
    "CHAT_SYSTEM_INSTRUCTION",
    "build_script_prompt",
    "NO_TRENDS_DIGEST",
    "build_digest_prompt",
    "build_trend_relevance_prompt",
]
