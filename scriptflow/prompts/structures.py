"""
Script structure templates.

Each structure is a list of timed sections. Section boundaries depend on the
requested video length; the renderer fills them into the section headings.
"""

from dataclasses import dataclass, field

from ..models.research import ScriptStructure, ScriptTone, VideoLength

WORD_COUNTS = {
    VideoLength.SHORT: "750-800",
    VideoLength.MEDIUM: "1500-1600",
    VideoLength.LONG: "2700-3000",
}


@dataclass(frozen=True)
class Section:
    name: str
    beats: tuple[str, ...]


@dataclass(frozen=True)
class ScriptTemplate:
    role: str
    sections: tuple[Section, ...]
    # Section end times per length; the last entry is the total runtime
    timings: dict[VideoLength, tuple[str, ...]]
    tones: dict[ScriptTone, str]
    practices: tuple[str, ...] = field(default_factory=tuple)

    def timeline(self, length: VideoLength) -> list[tuple[str, str]]:
        ends = self.timings.get(length) or self.timings[VideoLength.MEDIUM]
        starts = ("0:00",) + ends[:-1]
        return list(zip(starts, ends))


TEMPLATES: dict[ScriptStructure, ScriptTemplate] = {
    ScriptStructure.HOOK_PROBLEM_SOLUTION: ScriptTemplate(
        role="an expert YouTube scriptwriter who specializes in hook-problem-solution videos",
        sections=(
            Section("HOOK", ("Open with a surprising fact, bold claim or question", "Promise the payoff")),
            Section("PROBLEM DEFINITION", ("Describe the pain point concretely", "Use data from the sources to show scale")),
            Section("SOLUTION PRESENTATION", ("Walk through the solution step by step", "Back every step with evidence", "[B-ROLL] suggestions for each step")),
            Section("CALL TO ACTION", ("Recap the transformation", "Give one specific next action")),
        ),
        timings={
            VideoLength.SHORT: ("0:15", "1:30", "4:30", "5:00"),
            VideoLength.MEDIUM: ("0:15", "2:30", "9:00", "10:00"),
            VideoLength.LONG: ("0:15", "4:00", "16:30", "18:00"),
        },
        tones={
            ScriptTone.CASUAL: "Conversational and friendly, like talking to a friend. Use contractions and casual language.",
            ScriptTone.ENERGETIC: "High-energy and enthusiastic. Short punchy sentences and motivational language.",
            ScriptTone.AUTHORITATIVE: "Confident expert voice. Precise claims backed by evidence.",
            ScriptTone.PROFESSIONAL: "Clear, polished and credible. Friendly but focused.",
        },
        practices=("Every claim should trace back to a source", "Keep the problem relatable before offering the fix"),
    ),
    ScriptStructure.STORYTELLING: ScriptTemplate(
        role="an expert YouTube storyteller who turns research into narrative videos",
        sections=(
            Section("SETUP", ("Introduce the world and the protagonist", "Plant the central question")),
            Section("CONFLICT/INCITING INCIDENT", ("The moment everything changes", "Raise the stakes")),
            Section("RISING ACTION", ("Escalate with facts from the sources", "Build tension toward the turning point")),
            Section("CLIMAX", ("The decisive moment or revelation",)),
            Section("RESOLUTION", ("What changed and what it means", "Leave the viewer with a takeaway")),
        ),
        timings={
            VideoLength.SHORT: ("0:45", "1:30", "3:30", "4:15", "5:00"),
            VideoLength.MEDIUM: ("1:30", "3:00", "7:00", "8:30", "10:00"),
            VideoLength.LONG: ("2:30", "5:00", "12:30", "15:30", "18:00"),
        },
        tones={
            ScriptTone.CASUAL: "Campfire storytelling. Warm, personal and relatable.",
            ScriptTone.ENERGETIC: "Cinematic and dramatic. Vivid language and momentum.",
            ScriptTone.AUTHORITATIVE: "Documentary narrator. Measured and compelling.",
            ScriptTone.PROFESSIONAL: "Polished storytelling with clear narration. Engaging but not overly casual.",
        },
        practices=("Show, don't tell", "Ground the narrative in sourced facts"),
    ),
    ScriptStructure.LISTICLE: ScriptTemplate(
        role="an expert YouTube scriptwriter who creates countdown and list videos",
        sections=(
            Section("INTRO", ("Tease the best item on the list", "Explain how items were chosen")),
            Section("THE LIST", ("Each item gets a title, explanation and sourced example", "Build toward the strongest item", "[GRAPHICS] number card per item")),
            Section("HONORABLE MENTIONS", ("Two or three quick extras",)),
            Section("RECAP & CTA", ("Rapid recap of every item", "Ask viewers for their pick")),
        ),
        timings={
            VideoLength.SHORT: ("0:30", "4:00", "4:30", "5:00"),
            VideoLength.MEDIUM: ("0:30", "8:30", "9:15", "10:00"),
            VideoLength.LONG: ("0:30", "15:30", "17:00", "18:00"),
        },
        tones={
            ScriptTone.CASUAL: "Fun and breezy, like recommending things to a friend.",
            ScriptTone.ENERGETIC: "Fast-paced countdown energy. Build excitement item by item.",
            ScriptTone.AUTHORITATIVE: "Expert rankings with clear criteria.",
            ScriptTone.PROFESSIONAL: "Organized and informative. Each item earns its place.",
        },
        practices=("Keep items parallel in length and format", "Save the strongest item for last"),
    ),
    ScriptStructure.EDUCATIONAL_DEEP_DIVE: ScriptTemplate(
        role="an expert educational YouTube scriptwriter",
        sections=(
            Section("FOUNDATION", ("Why this topic matters", "Define the key terms")),
            Section("CORE CONCEPTS", ("Explain each concept with an analogy", "Cite the research for every fact")),
            Section("PRACTICAL APPLICATION", ("Real-world examples from the sources",)),
            Section("ADVANCED INSIGHTS", ("Nuances, edge cases and open questions",)),
            Section("SUMMARY & NEXT STEPS", ("Recap the learning path", "Suggest where to go deeper")),
        ),
        timings={
            VideoLength.SHORT: ("1:00", "2:30", "3:30", "4:15", "5:00"),
            VideoLength.MEDIUM: ("2:00", "5:00", "7:00", "8:30", "10:00"),
            VideoLength.LONG: ("3:00", "9:00", "13:00", "16:00", "18:00"),
        },
        tones={
            ScriptTone.CASUAL: "Friendly teacher explaining to students. Encourage questions and curiosity.",
            ScriptTone.ENERGETIC: "Enthusiastic educator making learning exciting.",
            ScriptTone.AUTHORITATIVE: "Expert professor lecturing. Deep knowledge presented with academic rigor.",
            ScriptTone.PROFESSIONAL: "Clear, methodical instruction. Accessible yet thorough.",
        },
        practices=("Move from simple to complex", "Check understanding with rhetorical questions"),
    ),
    ScriptStructure.COMMENTARY_ANALYSIS: ScriptTemplate(
        role="an expert YouTube commentary and analysis scriptwriter",
        sections=(
            Section("CONTEXT SETUP", ("What happened and who is involved",)),
            Section("INITIAL ANALYSIS", ("First take, supported by sources",)),
            Section("DEEPER DIVE", ("Second-order effects and motivations",)),
            Section("COUNTERPOINTS & NUANCE", ("Steelman the other side", "Acknowledge uncertainty")),
            Section("CONCLUSION & TAKEAWAY", ("Clear final position", "Invite discussion")),
        ),
        timings={
            VideoLength.SHORT: ("0:45", "2:00", "3:00", "4:00", "5:00"),
            VideoLength.MEDIUM: ("1:30", "4:00", "6:30", "8:30", "10:00"),
            VideoLength.LONG: ("2:30", "7:00", "12:00", "15:30", "18:00"),
        },
        tones={
            ScriptTone.CASUAL: "Conversational analysis, like discussing with friends.",
            ScriptTone.ENERGETIC: "Passionate commentary with strong opinions.",
            ScriptTone.AUTHORITATIVE: "Expert analysis with gravitas. Measured and well-reasoned.",
            ScriptTone.PROFESSIONAL: "Balanced commentary. Professional insights with clear reasoning.",
        },
        practices=("Separate facts from opinion", "Attribute every fact to a source"),
    ),
    ScriptStructure.NEWS_BREAKDOWN: ScriptTemplate(
        role="an expert YouTube news breakdown scriptwriter",
        sections=(
            Section("THE HEADLINE", ("Lead with the most important fact", "Immediate context")),
            Section("WHAT HAPPENED", ("Chronological breakdown", "Who, what, when, where", "[B-ROLL] of news footage")),
            Section("WHY IT MATTERS", ("Impact analysis", "Who is affected")),
            Section("CONTEXT & BACKGROUND", ("Historical context", "Expert perspectives from sources")),
            Section("IMPLICATIONS & WHAT'S NEXT", ("Possible scenarios", "Developments to watch")),
            Section("WRAP-UP", ("Summary of key points", "How to stay informed")),
        ),
        timings={
            VideoLength.SHORT: ("0:20", "1:30", "2:30", "3:30", "4:30", "5:00"),
            VideoLength.MEDIUM: ("0:20", "3:00", "5:00", "7:00", "9:00", "10:00"),
            VideoLength.LONG: ("0:20", "5:00", "9:00", "13:00", "16:00", "18:00"),
        },
        tones={
            ScriptTone.CASUAL: "Accessible news explainer. Break down complex news into understandable pieces.",
            ScriptTone.ENERGETIC: "Breaking news energy! Urgent but informative.",
            ScriptTone.AUTHORITATIVE: "Serious journalism. Credible, thorough, unbiased reporting.",
            ScriptTone.PROFESSIONAL: "Standard news delivery. Clear, factual, balanced.",
        },
        practices=("Lead with facts, not opinion", "Acknowledge what is still unknown"),
    ),
}


def render_structure(template: ScriptTemplate, length: VideoLength, tone: ScriptTone) -> str:
    """Render the timed outline, target length and tone for one structure."""
    blocks = []
    for number, (section, (start, end)) in enumerate(zip(template.sections, template.timeline(length)), 1):
        beats = "\n".join(f"   - {beat}" for beat in section.beats)
        blocks.append(f"{number}. {section.name} ({start}-{end}):\n{beats}")

    practices = "\n".join(f"- {p}" for p in template.practices)
    return (
        "\n\n".join(blocks)
        + f"\n\nTARGET: {WORD_COUNTS[length]} words"
        + f"\nTONE: {template.tones[tone]}"
        + (f"\n\nBEST PRACTICES:\n{practices}" if practices else "")
    )
