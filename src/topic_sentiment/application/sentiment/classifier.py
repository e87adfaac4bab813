"""
Sentiment classification with the VADER lexicon model.

VADER's compound score lies in [-1, 1]. Labels use the standard cut-offs:
    compound >= 0.05  -> Positive
    compound <= -0.05 -> Negative
    otherwise         -> Neutral

Classification is deterministic and never consults the query.
"""

from __future__ import annotations

from collections.abc import Iterable

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from topic_sentiment.domain.entities import RawItem, ScoredItem, Sentiment

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


class SentimentClassifier:
    """Maps free text to a three-way Sentiment label."""

    def __init__(self, analyzer: SentimentIntensityAnalyzer | None = None) -> None:
        self._analyzer = analyzer or SentimentIntensityAnalyzer()

    def compound(self, text: str) -> float:
        """VADER compound polarity for ``text`` (0.0 for blank text)."""
        if not text or not text.strip():
            return 0.0
        return float(self._analyzer.polarity_scores(text)["compound"])

    def classify(self, text: str) -> Sentiment:
        score = self.compound(text)
        if score >= POSITIVE_THRESHOLD:
            return Sentiment.POSITIVE
        if score <= NEGATIVE_THRESHOLD:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

    def score_item(self, item: RawItem) -> ScoredItem:
        """Label one item from its body, or its title when the body is empty."""
        return ScoredItem(item=item, sentiment=self.classify(item.sentiment_text))

    def score_items(self, items: Iterable[RawItem]) -> list[ScoredItem]:
        return [self.score_item(item) for item in items]
