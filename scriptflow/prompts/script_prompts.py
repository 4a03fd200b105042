"""Script generation prompts grounded in research sources."""

from typing import Optional

from ..models.research import ResearchSource, ScriptOptions
from ..research.synthesizer import format_synthesis_for_prompt, synthesize_research
from .citations import format_sources_with_natural_citations, get_citation_instructions
from .structures import TEMPLATES, render_structure

CHAT_SYSTEM_INSTRUCTION = """You are an expert YouTube research and scriptwriting assistant. Your job is to help content creators:

1. Research trending topics and video ideas
2. Analyze competitors and successful content strategies
3. Write engaging, well-structured YouTube scripts with:
   - Attention-grabbing hooks
   - Clear narrative flow
   - Strategic CTAs (calls to action)
   - Optimized pacing for viewer retention

4. Provide SEO guidance for titles, descriptions, and tags
5. Suggest visual elements and B-roll ideas

Be creative, data-driven, and always focus on maximizing viewer engagement and retention."""


def build_script_prompt(
    topic: str,
    sources: list[ResearchSource],
    options: Optional[ScriptOptions] = None,
) -> str:
    """Full script prompt for a researched topic."""
    options = options or ScriptOptions()
    template = TEMPLATES[options.structure]

    synthesis_text = format_synthesis_for_prompt(synthesize_research(sources))
    sources_text = format_sources_with_natural_citations(sources, options.include_citations)
    outline = render_structure(template, options.length, options.tone)

    return f"""You are {template.role}.

TOPIC: {topic}

{synthesis_text}

{sources_text}

SCRIPT STRUCTURE:

{outline}
CITATIONS: {get_citation_instructions(options.include_citations)}

FORMATTING:
- Mark visual cues as [B-ROLL] and on-screen text as [GRAPHICS]
- Write for the ear: short sentences, natural rhythm

Generate the complete script now."""
