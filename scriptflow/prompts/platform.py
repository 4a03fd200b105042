"""Prompts for repurposing a video script to other platforms."""

from dataclasses import dataclass
from typing import Callable

from ..models.research import ResearchSource


@dataclass(frozen=True)
class PlatformPrompt:
    system_prompt: str
    build_user_prompt: Callable[[str, list[ResearchSource], str], str]


def _blog_prompt(topic: str, sources: list[ResearchSource], youtube_script: str) -> str:
    listed = "\n\n".join(
        f"[{i}] {s.title}\n{s.url}\n{s.summary or (s.text or '')[:200]}"
        for i, s in enumerate(sources, 1)
    )
    return f"""Create a comprehensive blog post about: {topic}

RESEARCH SOURCES:
{listed}

REFERENCE SCRIPT (for content ideas - DO NOT copy verbatim):
{youtube_script[:1000]}...

REQUIREMENTS:
1. Write a 800-1200 word blog post optimized for Medium/Substack
2. Start with a compelling hook
3. Use clear headers (##) to organize sections
4. Include specific facts and examples from the research sources
5. Add inline citations like [Source 1] when referencing specific claims
6. End with key takeaways and a thought-provoking conclusion
7. Use markdown formatting (bold, italics, lists)
8. DO NOT include video timestamps or "in this video" language

BLOG POST:"""


def _twitter_prompt(topic: str, sources: list[ResearchSource], youtube_script: str) -> str:
    insights = "\n\n".join(
        f"{i}. {s.title}\nKey point: {(s.summary or s.text or '')[:150]}"
        for i, s in enumerate(sources[:5], 1)
    )
    return f"""Create a Twitter thread from this research about: {topic}

RESEARCH INSIGHTS:
{insights}

CONTENT TO ADAPT (DO NOT copy word-for-word, extract key insights):
{youtube_script[:1200]}

YOUR TASK:
Create an 8-12 tweet thread:
1. HOOK TWEET: surprising fact, bold claim or provocative question, under 240 characters
2. BODY TWEETS: numbered "1/", "2/", one insight each, under 270 characters, no markdown
3. CLOSING TWEET: memorable takeaway ending with a question

DO NOT use video references, timestamps, markdown, B-roll cues or hashtags in the body.
Separate tweets with a line containing only ---

TWITTER THREAD:"""


PLATFORM_PROMPTS: dict[str, PlatformPrompt] = {
    "blog": PlatformPrompt(
        system_prompt="""You are an expert blog writer who creates engaging, well-researched articles for Medium and Substack. Your writing is:
- Clear and accessible to general audiences
- Well-structured with headers and sections
- Evidence-based with proper citations
- Engaging with a conversational yet authoritative tone
- SEO-friendly with natural keyword usage""",
        build_user_prompt=_blog_prompt,
    ),
    "twitter": PlatformPrompt(
        system_prompt="""You are a Twitter thread expert who understands what makes content go viral.

CRITICAL RULES:
- Each tweet MUST be under 280 characters (including numbers like "1/")
- Twitter doesn't support markdown - use plain text only
- Line breaks are your formatting tool
- Every tweet should be valuable standalone
- No video references, timestamps, or YouTube language""",
        build_user_prompt=_twitter_prompt,
    ),
}

SUPPORTED_PLATFORMS = tuple(PLATFORM_PROMPTS)


def get_platform_prompt(platform: str) -> PlatformPrompt:
    return PLATFORM_PROMPTS.get(platform, PLATFORM_PROMPTS["blog"])
