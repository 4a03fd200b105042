"""Topic research and synthesis."""

from .exa_researcher import ExaResearcher
from .synthesizer import format_synthesis_for_prompt, synthesize_research

__all__ = ["ExaResearcher", "format_synthesis_for_prompt", "synthesize_research"]
