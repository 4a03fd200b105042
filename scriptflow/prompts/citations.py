"""Source formatting with natural-language citation guidance."""

from urllib.parse import urlparse

from ..models.research import ResearchSource

PUBLICATION_NAMES = {
    "techcrunch.com": "TechCrunch",
    "theverge.com": "The Verge",
    "wired.com": "Wired",
    "arstechnica.com": "Ars Technica",
    "nytimes.com": "The New York Times",
    "wsj.com": "The Wall Street Journal",
    "reuters.com": "Reuters",
    "bloomberg.com": "Bloomberg",
    "forbes.com": "Forbes",
    "medium.com": "Medium",
    "substack.com": "Substack",
    "github.com": "GitHub",
    "openai.com": "OpenAI",
    "anthropic.com": "Anthropic",
    "mit.edu": "MIT",
    "stanford.edu": "Stanford",
    "arxiv.org": "arXiv",
    "nature.com": "Nature",
    "science.org": "Science",
    "bbc.com": "BBC",
    "cnn.com": "CNN",
    "theguardian.com": "The Guardian",
}


def extract_publication_name(url: str, title: str) -> str:
    """Readable publication name from a source URL, falling back to the title."""
    domain = urlparse(url).netloc.replace("www.", "")
    if not domain:
        return " ".join(title.split()[:2])

    if domain in PUBLICATION_NAMES:
        return PUBLICATION_NAMES[domain]

    parts = domain.split(".")
    main = parts[-2] if len(parts) >= 2 else parts[0]
    return main[:1].upper() + main[1:]


def _format_source(index: int, source: ResearchSource) -> str:
    name = extract_publication_name(source.url, source.title)
    lines = [
        f"Source #{index} - {name}",
        f"Title: {source.title}",
        f"URL: {source.url}",
    ]
    if source.published_date:
        lines.append(f"Published: {source.published_date}")
    if source.author:
        lines.append(f"Author: {source.author}")
    lines.append(f"Summary: {source.summary}")
    if source.highlights:
        lines.append(f"Key Points: {'; '.join(source.highlights[:3])}")
    if source.text:
        lines.append(f"Excerpt: {source.text[:500]}...")

    lines += [
        "",
        "WHEN CITING THIS SOURCE, use natural language like:",
        f'- "According to {name}, ..."',
        f'- "{name} reports that..."',
        f'- "As {name} notes, ..."',
        f'- "Research from {name} shows..."',
    ]
    if source.author:
        lines.append(f'- "{source.author} writes that..."')
    lines.append("---")
    return "\n".join(lines)


def format_sources_with_natural_citations(sources: list[ResearchSource], include_citations: bool) -> str:
    """Sources block for script and refinement prompts."""
    if not include_citations:
        listed = "\n".join(f"- {s.title}: {s.summary[:150]}..." for s in sources[:5])
        return f"RESEARCH SOURCES ({len(sources)} total - use information but don't cite):\n{listed}"

    formatted = "\n\n".join(_format_source(i, s) for i, s in enumerate(sources, 1))
    return f"""RESEARCH SOURCES:
{formatted}

CITATION INSTRUCTIONS:
- Use the publication name naturally in your writing
- Do NOT use [Source #1] or [Source X] format
- Make citations sound journalistic and professional
- Examples: "According to TechCrunch, ..." or "The Verge reports..." or "MIT research shows..."
- Integrate citations smoothly into the narrative
- Maintain credibility by attributing information to sources"""


def get_citation_instructions(include_citations: bool) -> str:
    if include_citations:
        return "Cite sources using natural language (e.g., 'According to TechCrunch, ...') - NOT [Source #] format."
    return "Do not include source citations in the script."
