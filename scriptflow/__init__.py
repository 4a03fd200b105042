"""
ScriptFlow - research-grounded script generation.

Pipeline stages:
1. Research - Exa search for ranked sources
2. Synthesis - heuristic research brief + prompt building
3. Generation - Gemini streaming with bounded retry
4. Repurposing - platform rewrites and trend digests
"""

__version__ = "1.0.0"
