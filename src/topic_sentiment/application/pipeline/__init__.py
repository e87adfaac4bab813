"""End-to-end analysis pipeline."""

from .aggregator import SentimentAggregator, SourceAdapter, validate_query

__all__ = ["SentimentAggregator", "SourceAdapter", "validate_query"]
