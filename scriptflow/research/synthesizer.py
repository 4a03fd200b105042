"""
Heuristic synthesis of research sources into a prompt-ready brief.

Plain string matching only; no semantic analysis.
"""

from datetime import datetime
from typing import Optional

from ..models.research import ResearchSource, ResearchSynthesis

OPPOSING_PAIRS = [
    ("positive", "negative"),
    ("increase", "decrease"),
    ("beneficial", "harmful"),
    ("effective", "ineffective"),
    ("supports", "opposes"),
]


def synthesize_research(sources: list[ResearchSource]) -> ResearchSynthesis:
    """Build a structured brief from a list of sources."""
    if not sources:
        return ResearchSynthesis(consensus="No sources available for synthesis.")

    return ResearchSynthesis(
        key_themes=_key_themes(sources),
        main_points=_main_points(sources),
        consensus=_consensus(sources),
        contradictions=_contradictions(sources),
        most_recent_source=_most_recent(sources),
        most_authoritative_source=_most_authoritative(sources),
    )


def _key_themes(sources: list[ResearchSource]) -> list[str]:
    themes: list[str] = []
    for source in sources:
        for highlight in source.highlights or []:
            theme = highlight[:100]
            if len(highlight.split()) >= 3 and theme not in themes:
                themes.append(theme)
    return themes[:5]


def _main_points(sources: list[ResearchSource]) -> list[str]:
    points = []
    for source in sources:
        if source.summary:
            suffix = "..." if len(source.summary) > 200 else ""
            points.append(f"{source.summary[:200]}{suffix}")
    return points[:8]


def _consensus(sources: list[ResearchSource]) -> str:
    if len(sources) == 1:
        return sources[0].summary

    summaries = [s.summary.lower() for s in sources]
    common_words: list[str] = []
    for summary in summaries:
        for word in summary.split():
            if len(word) <= 5 or word in common_words:
                continue
            if sum(1 for s in summaries if word in s) >= 2:
                common_words.append(word)

    if common_words:
        return f"Multiple sources discuss: {', '.join(common_words[:5])}"
    return "Sources cover related but distinct aspects of the topic."


def _contradictions(sources: list[ResearchSource]) -> list[str]:
    found = []
    for i, first in enumerate(sources):
        for second in sources[i + 1:]:
            for word1, word2 in OPPOSING_PAIRS:
                if word1 in first.summary.lower() and word2 in second.summary.lower():
                    found.append(
                        f"Some sources suggest {word1} perspectives while others indicate {word2} viewpoints"
                    )
    return found[:3]


def _parse_date(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _most_recent(sources: list[ResearchSource]) -> Optional[ResearchSource]:
    dated = [(s, _parse_date(s.published_date)) for s in sources if s.published_date]
    dated = [(s, d) for s, d in dated if d is not None]
    if not dated:
        return None
    # Compare naive and aware dates on their wall-clock value
    return max(dated, key=lambda pair: pair[1].replace(tzinfo=None))[0]


def _most_authoritative(sources: list[ResearchSource]) -> Optional[ResearchSource]:
    scored = [s for s in sources if s.score is not None]
    if not scored:
        return sources[0]
    return max(scored, key=lambda s: s.score)


def format_synthesis_for_prompt(synthesis: ResearchSynthesis) -> str:
    """Render a synthesis as the RESEARCH SYNTHESIS prompt block."""
    lines = ["RESEARCH SYNTHESIS:", ""]

    if synthesis.key_themes:
        lines.append("Key Themes:")
        lines.extend(f"{i}. {theme}" for i, theme in enumerate(synthesis.key_themes, 1))
        lines.append("")

    lines.append(f"Consensus: {synthesis.consensus}")
    lines.append("")

    if synthesis.contradictions:
        lines.append("Note - Contradictions Found:")
        lines.extend(f"- {c}" for c in synthesis.contradictions)
        lines.append("")

    if synthesis.most_recent_source:
        recent = synthesis.most_recent_source
        lines.append(f"Most Recent Source: {recent.title} ({recent.published_date})")
        lines.append("")

    if synthesis.main_points:
        lines.append("Main Points Across Sources:")
        lines.extend(f"{i}. {point}" for i, point in enumerate(synthesis.main_points, 1))

    return "\n".join(lines)
