"""
Topic Sentiment - public sentiment about a topic from news, encyclopedia and discussion sources.

Usage:
    from topic_sentiment import create_container

    container = create_container()
    report = await container.aggregator().run("electric cars")

    print(report.summary.percentages)
    for item in report.results:
        print(f"{item.relevance:.2f} {item.sentiment.value:8} {item.title}")

Features:
    - Concurrent retrieval from GNews, Wikipedia and Reddit
    - Per-source failure isolation (a failing source only shrinks the result set)
    - VADER lexicon sentiment labels
    - Sentence-embedding relevance ranking
    - FastAPI HTTP surface (``topic-sentiment-api``)
"""

from .application.pipeline import SentimentAggregator
from .container import ApplicationContainer, create_container
from .domain.entities import AnalysisReport, RawItem, ScoredItem, Sentiment, SourceKind, Summary

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "create_container",
    "ApplicationContainer",
    "SentimentAggregator",
    # Entities
    "AnalysisReport",
    "Summary",
    "RawItem",
    "ScoredItem",
    "Sentiment",
    "SourceKind",
]
