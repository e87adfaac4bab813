"""Lexicon-based sentiment classification."""

from .classifier import NEGATIVE_THRESHOLD, POSITIVE_THRESHOLD, SentimentClassifier

__all__ = ["SentimentClassifier", "POSITIVE_THRESHOLD", "NEGATIVE_THRESHOLD"]
