"""Trend relevance analysis."""

from .analyzer import analyze_in_batches, analyze_trend_relevance, batch_analyze_trends

__all__ = ["analyze_in_batches", "analyze_trend_relevance", "batch_analyze_trends"]
