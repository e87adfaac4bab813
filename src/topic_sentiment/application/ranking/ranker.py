"""
Embedding-based relevance ranking.

Relevance is the cosine similarity between the query embedding and each
item's embedding. Items are embedded from ``RawItem.ranking_text`` (title
first), so encyclopedia pages rank on their title rather than the full
extract.

Architecture:
    The ranker holds an injected Embedder handle and no other state. It
    does not catch RankingUnavailableError; the aggregator decides how a
    ranking failure degrades the run.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from topic_sentiment.application.ranking.embedder import Embedder
from topic_sentiment.domain.entities import ScoredItem


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero norm. The result is clamped to
    [-1, 1] to absorb floating point drift on unit vectors.
    """
    if len(a) != len(b):
        raise ValueError(f"dimension mismatch: {len(a)} != {len(b)}")

    dot = math.fsum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(math.fsum(x * x for x in a))
    norm_b = math.sqrt(math.fsum(y * y for y in b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))


class RelevanceRanker:
    """Sorts items by descending semantic similarity to the query."""

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder

    async def rank(self, query: str, items: Sequence[ScoredItem]) -> list[ScoredItem]:
        """
        Annotate each item with ``relevance`` and sort descending.

        Ties keep their input order. The query and the items go to the model
        in one batch, query first.

        Raises:
            RankingUnavailableError: the embedding model failed
        """
        if not items:
            return []

        query_vector, *item_vectors = await self._embedder.embed(
            [query, *(item.item.ranking_text for item in items)]
        )

        annotated = [
            item.with_relevance(cosine_similarity(query_vector, vector))
            for item, vector in zip(items, item_vectors, strict=True)
        ]
        return sorted(annotated, key=lambda item: item.relevance, reverse=True)
