"""
Domain Entities

Core value objects for topic sentiment analysis.
"""

from __future__ import annotations

from .item import RawItem, ScoredItem, Sentiment, SourceKind, SourceResult
from .summary import AnalysisReport, DegradedSource, Summary

__all__ = [
    # Item entities
    "RawItem",
    "ScoredItem",
    "Sentiment",
    "SourceKind",
    "SourceResult",
    # Summary entities
    "Summary",
    "DegradedSource",
    "AnalysisReport",
]
