"""Prompts for trend relevance scoring and the daily digest."""

import json

from ..models.trends import AvatarProfile, Trend, TrendSuggestion

NO_TRENDS_DIGEST = "No trending topics found for your avatar today. Check back tomorrow!"


def build_trend_relevance_prompt(trend: Trend, avatar: AvatarProfile) -> str:
    return f"""You are analyzing if a trending topic is relevant to a content creator avatar.

AVATAR PROFILE:
Name: {avatar.name}
Description: {avatar.description}
Interests: {json.dumps(avatar.interests, indent=2)}
Tone: {avatar.tone}
Audience Level: {avatar.audience_level}

TRENDING TOPIC:
Source: {trend.source}
Title: {trend.title}
Description: {trend.description or 'N/A'}
URL: {trend.url or 'N/A'}
Engagement: {trend.engagement_score:g} points

TASK:
Determine if this trend is relevant to this avatar's content strategy.

Return ONLY valid JSON (no markdown, no code blocks):
{{
  "is_relevant": boolean,
  "relevance_score": number (0.0 to 1.0),
  "reasoning": "brief explanation",
  "suggested_angle": "how avatar should approach this topic",
  "urgency": "rising" | "peaking" | "stable"
}}

Be ruthlessly honest. False positives waste creator time."""


def build_digest_prompt(suggestions: list[TrendSuggestion], avatar_name: str) -> str:
    listed = "\n".join(
        f"""{i}. {s.trend.title}
   Source: {s.trend.source}
   Why relevant: {s.why_relevant}
   Suggested angle: {s.suggested_angle}
   Engagement: {s.trend.engagement_score:g} points"""
        for i, s in enumerate(suggestions, 1)
    )
    return f"""Create an engaging daily trend digest email for a content creator.

AVATAR: {avatar_name}

TOP TRENDS (already filtered for relevance):
{listed}

Create a concise, energizing email digest (max 300 words):
- Start with a personalized greeting for {avatar_name}
- Present the top 3-5 trends with emojis
- Include the suggested angle for each
- Add one-sentence calls to action ("Generate script", "Learn more")
- Keep tone encouraging and action-oriented

Return plain text (no markdown)."""
