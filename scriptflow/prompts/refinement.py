"""Prompts for iterative script refinement."""

from typing import Optional

from ..models.research import ResearchSource, ScriptOptions
from .citations import format_sources_with_natural_citations


def build_refinement_prompt(
    current_script: str,
    refinement_instruction: str,
    sources: list[ResearchSource],
    options: Optional[ScriptOptions] = None,
) -> str:
    """Single refinement pass over a complete script."""
    include_citations = options.include_citations if options else True
    sources_text = format_sources_with_natural_citations(sources, include_citations)

    return f"""You are refining a YouTube script based on user feedback.

CURRENT SCRIPT:
{current_script}

USER'S REFINEMENT REQUEST:
{refinement_instruction}

{sources_text}

IMPORTANT INSTRUCTIONS:
- Make ONLY the changes requested by the user
- Preserve the overall structure and quality unless specifically asked to change them
- Maintain all existing citations and add new ones if adding content
- Keep the same tone unless specifically asked to change it
- If adding new information, cite the relevant source using natural language (e.g., "According to TechCrunch, ...")
- If shortening, remove less critical content first and preserve key points
- Output the COMPLETE refined script, not just the changes

Generate the complete refined script now."""


def build_multi_turn_refinement_prompt(
    current_script: str,
    history: list[str],
    new_instruction: str,
    sources: list[ResearchSource],
    options: Optional[ScriptOptions] = None,
) -> str:
    """Refinement prompt that carries earlier instructions forward."""
    include_citations = options.include_citations if options else True
    sources_text = format_sources_with_natural_citations(sources, include_citations)

    listed = "\n".join(f'Refinement {i}: "{instruction}"' for i, instruction in enumerate(history, 1))
    history_text = (
        f"PREVIOUS REFINEMENTS:\n{listed}\n\n"
        "This context shows what changes have been made so far. Build on these refinements.\n"
    )

    return f"""You are continuing to refine a YouTube script based on iterative user feedback.

CURRENT SCRIPT STATE:
{current_script}

{history_text}
NEW REFINEMENT REQUEST:
{new_instruction}

{sources_text}

IMPORTANT INSTRUCTIONS:
- This is refinement #{len(history) + 1} in an ongoing conversation
- Apply the new instruction while preserving all previous improvements
- Don't undo previous refinements unless the new instruction explicitly asks to
- Maintain all existing citations and structure
- Output the COMPLETE refined script incorporating all changes

Generate the complete refined script now."""


REFINEMENT_SUGGESTIONS = [
    {
        "label": "Make it shorter",
        "instruction": "Shorten this script to fit a shorter video format. Remove less critical points while keeping the core message and all important citations.",
    },
    {
        "label": "Add more statistics",
        "instruction": "Add more data points and statistics from the research sources. Cite each statistic with natural language citations (e.g., 'According to [Source], ...').",
    },
    {
        "label": "More casual tone",
        "instruction": "Make the tone more casual and conversational. Use simpler language, contractions, and a friendlier voice while keeping all facts and citations.",
    },
    {
        "label": "More professional tone",
        "instruction": "Make the tone more professional and authoritative. Use formal language and stronger, more confident phrasing while keeping all facts and citations.",
    },
    {
        "label": "Strengthen the hook",
        "instruction": "Make the opening hook more dramatic and attention-grabbing. Use a stronger opening statement, surprising fact, or compelling question.",
    },
    {
        "label": "Add B-roll suggestions",
        "instruction": "Add more [B-ROLL] and [GRAPHICS] suggestions throughout the script to guide the video editor on what visuals to include.",
    },
    {
        "label": "Add more examples",
        "instruction": "Add more concrete examples and use cases from the research sources to make abstract concepts more relatable.",
    },
    {
        "label": "Stronger CTA",
        "instruction": "Strengthen the call-to-action at the end. Make it more compelling and give viewers a clear, specific action to take.",
    },
]
