"""
Source adapters.

Each adapter normalizes one external service into RawItem objects:
- GNewsClient: news headlines
- WikipediaClient: encyclopedia intro extracts
- RedditClient: discussion posts, admission-filtered
"""

from .base_client import BaseAPIClient
from .gnews import GNewsClient
from .reddit import RedditClient, admit_post
from .wikipedia import WikipediaClient

__all__ = [
    "BaseAPIClient",
    "GNewsClient",
    "WikipediaClient",
    "RedditClient",
    "admit_post",
]
